from dataclasses import dataclass

from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

from sharedtimer.models import ID_GENERATORS
from sharedtimer.rooms import RoomManager
from sharedtimer.services.timers import Clock, TimerRegistry
from sharedtimer.services.timers.reaper import InactivityReaper
from sharedtimer.services.timers.watcher import CompletionWatcher

socketio = SocketIO(async_mode=None)


@dataclass
class TimerServices:
    clock: Clock
    registry: TimerRegistry
    rooms: RoomManager
    watcher: CompletionWatcher
    reaper: InactivityReaper


def get_services(flask_app=None) -> TimerServices:
    return (flask_app or current_app).extensions['sharedtimer']


def create_app(config_class=Config, clock=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Background loops are off in tests unless explicitly requested
    background = not flask_app.config.get('TESTING') or bool(flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS'))
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')

    clock = clock or Clock()
    id_style = flask_app.config.get('TIMER_ID_STYLE', 'readable')
    if id_style not in ID_GENERATORS:
        raise ValueError(f"Unknown TIMER_ID_STYLE {id_style!r}; expected one of {sorted(ID_GENERATORS)}")
    registry = TimerRegistry(clock=clock, id_generator=ID_GENERATORS[id_style])
    rooms = RoomManager(registry, socketio, clock, namespace=namespace, logger=flask_app.logger)
    watcher = CompletionWatcher(
        registry, clock, rooms.complete,
        interval=float(flask_app.config.get('WATCHER_INTERVAL_SEC', 1.0)),
        socketio=socketio, background=background, lock=rooms.lock, logger=flask_app.logger,
    )
    rooms.watcher = watcher
    reaper = InactivityReaper(
        registry, clock, rooms.evict,
        timeout_sec=int(flask_app.config.get('INACTIVITY_TIMEOUT_SEC', 1800)),
        interval_sec=float(flask_app.config.get('CLEANUP_INTERVAL_SEC', 300)),
        absolute_factor=int(flask_app.config.get('ABSOLUTE_TIMEOUT_FACTOR', 4)),
        socketio=socketio, background=background, lock=rooms.lock, logger=flask_app.logger,
    )
    flask_app.extensions['sharedtimer'] = TimerServices(
        clock=clock, registry=registry, rooms=rooms, watcher=watcher, reaper=reaper,
    )

    # Import and register blueprints here
    from sharedtimer.main import main
    flask_app.register_blueprint(main)

    from sharedtimer.api.timers import timers
    flask_app.register_blueprint(timers)

    # Register Socket.IO event handlers once per namespace; they dispatch
    # against whatever room the calling session currently occupies
    from sharedtimer.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    reaper.start()

    return flask_app
