from flask import Blueprint, current_app, jsonify

from sharedtimer import get_services
from sharedtimer.services.timers.state_machine import current_remaining, snapshot

timers = Blueprint('timers', __name__)


@timers.route('/create-timer', methods=['GET', 'POST'])
def create_timer():
    """
    Creates a new zero-state timer room and returns its id.
    """
    services = get_services()
    with services.rooms.lock:
        timer_id = services.registry.create()
    current_app.logger.info(f"[timer-create] room={timer_id} total={len(services.registry)}")
    return jsonify({'timerId': timer_id}), 201


@timers.route('/api/timers/<string:timer_id>', methods=['GET'])
def get_timer(timer_id):
    """
    Returns the current state of one timer, as sent on join.
    """
    services = get_services()
    with services.rooms.lock:
        record = services.registry.get(timer_id)
        if record is None:
            return jsonify({'error': 'Timer not found'}), 404
        payload = snapshot(record, services.clock.now())
        payload['id'] = record.id
        payload['connectedUsers'] = record.connected_users
    return jsonify(payload)


@timers.route('/api/stats', methods=['GET'])
def get_stats():
    """
    Aggregate counts plus a per-room summary. Read-only, for monitoring.
    """
    services = get_services()
    with services.rooms.lock:
        now = services.clock.now()
        records = services.registry.records()
        stats = {
            'totalTimers': len(records),
            'activeTimers': sum(1 for r in records if r.running),
            'totalConnectedUsers': sum(r.connected_users for r in records),
            'timers': [
                {
                    'id': r.id[:8] + '...',
                    'connectedUsers': r.connected_users,
                    'running': r.running,
                    'time': current_remaining(r, now),
                    'inactiveMins': round((now - r.last_activity) / 60000),
                }
                for r in records
            ],
        }
    return jsonify(stats)
