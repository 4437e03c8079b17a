import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Comma separated list of origins allowed for HTTP and Socket.IO
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Room ids: 'readable' (happy-cloud-42) or 'uuid'
    TIMER_ID_STYLE = os.environ.get('TIMER_ID_STYLE', 'readable')
    # Completion watcher recheck interval (seconds)
    WATCHER_INTERVAL_SEC = float(os.environ.get('WATCHER_INTERVAL_SEC', '1.0'))
    # Inactivity reaper (seconds)
    INACTIVITY_TIMEOUT_SEC = int(os.environ.get('INACTIVITY_TIMEOUT_SEC', '1800'))
    CLEANUP_INTERVAL_SEC = int(os.environ.get('CLEANUP_INTERVAL_SEC', '300'))
    # Rooms idle longer than timeout * factor are evicted even with users connected
    ABSOLUTE_TIMEOUT_FACTOR = int(os.environ.get('ABSOLUTE_TIMEOUT_FACTOR', '4'))
