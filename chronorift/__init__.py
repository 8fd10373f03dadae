# chronorift/__init__.py
from flask import Flask, request
from config import Config
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
import logging
import atexit
import fcntl
import os

# Set up logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    handlers=[
        logging.FileHandler(Config.LOG_FILE),
        logging.StreamHandler()  # Also log to console
    ]
)
# APScheduler logs every 1-second run at INFO
logging.getLogger('apscheduler').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    logger.info("Creating Flask application")
    app = Flask(__name__)
    app.config.from_object(config_class)

    from chronorift.utils import load_settings
    from chronorift.scheduler import SpawnScheduler
    from chronorift.tasks import SpawnCountdown, refresh_countdown

    # Configuration errors (bad interval, unknown timezone, ...) are fatal at startup
    logger.info("Building spawn rotation from configuration")
    settings = load_settings(app.config)
    spawn_scheduler = SpawnScheduler.from_settings(settings)
    countdown = SpawnCountdown(spawn_scheduler)
    app.extensions['chronorift'] = spawn_scheduler
    app.extensions['chronorift_countdown'] = countdown

    from chronorift.routes import bp as main_bp
    app.register_blueprint(main_bp)
    logger.info("Main blueprint registered")

    # Add request logging
    @app.before_request
    def log_request():
        logger.info(f"REQUEST: {request.method} {request.path} from {request.remote_addr}")

    @app.after_request
    def log_response(response):
        logger.info(f"RESPONSE: {request.method} {request.path} -> {response.status_code}")
        return response

    if not app.config.get('SCHEDULER_ENABLED', True):
        logger.info("Background scheduler disabled by configuration")
        logger.info("Flask application created successfully")
        return app

    # Initialize background scheduler for the countdown refresh
    # Use file locking to ensure only ONE worker (in multi-worker setup) runs the scheduler
    lock_file_path = os.path.join(app.instance_path, 'scheduler.lock')
    os.makedirs(app.instance_path, exist_ok=True)

    try:
        # Try to acquire exclusive lock (non-blocking)
        lock_file = open(lock_file_path, 'w')
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)

        # If we got here, we acquired the lock - this worker will run the scheduler
        logger.info("🔒 This worker acquired the scheduler lock - initializing background scheduler")
        scheduler = BackgroundScheduler()

        refresh_seconds = app.config.get('REFRESH_INTERVAL_SECONDS', 1)
        scheduler.add_job(
            func=refresh_countdown,
            args=[countdown],
            trigger=IntervalTrigger(seconds=refresh_seconds),
            id='refresh_spawn_countdown',
            name='Refresh next spawn countdown',
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )

        # Start the scheduler
        scheduler.start()
        logger.info("✅ Background scheduler started:")
        logger.info(f"  - Spawn countdown will refresh every {refresh_seconds} second(s)")

        # Shut down the scheduler and release lock when exiting the app
        def cleanup():
            scheduler.shutdown()
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            lock_file.close()
            logger.info("🔓 Scheduler shut down and lock released")

        atexit.register(cleanup)

    except IOError:
        # Lock already held by another worker - skip scheduler initialization
        logger.info("⏭️  Another worker is running the scheduler - skipping initialization in this worker")

    logger.info("Flask application created successfully")
    return app
