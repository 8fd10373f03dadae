# chronorift/routes.py
from flask import Blueprint, current_app, jsonify, request
from chronorift.scheduler import format_countdown
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('main', __name__)


def get_spawn_scheduler():
    return current_app.extensions['chronorift']


def get_countdown():
    return current_app.extensions['chronorift_countdown']


def _int_arg(name, default=None, minimum=None):
    """Read an integer query parameter, raising ValueError with a readable message"""
    raw = request.args.get(name)
    if raw is None or raw == '':
        if default is None:
            raise ValueError(f"'{name}' is required")
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"'{name}' must be an integer, got {raw!r}")
    if minimum is not None and value < minimum:
        raise ValueError(f"'{name}' must be >= {minimum}, got {value}")
    return value


@bp.route('/api/spawn/slot/<int(signed=True):offset>')
def spawn_slot(offset):
    """Spawn prediction `offset` hours from the current hour"""
    prediction = get_spawn_scheduler().slot_at_offset(offset)
    logger.debug(f"Slot at offset {offset}: {prediction.chest} / {prediction.ore}")
    return jsonify(prediction.to_dict())


@bp.route('/api/spawn/next')
def next_spawn():
    """Next spawn boundary and the location active at it"""
    scheduler = get_spawn_scheduler()
    now = scheduler.engine.resolve_now()
    next_time = scheduler.next_spawn_time(now)
    location = scheduler.next_spawn_location(now)

    return jsonify({
        'now': now.isoformat(),
        'next_spawn_time': next_time.isoformat(),
        'seconds_until': int((next_time - now).total_seconds()),
        'countdown': format_countdown(next_time - now),
        'location': location.to_dict(),
    })


@bp.route('/api/spawn/schedule')
def spawn_schedule():
    """
    Forward-looking spawn list.

    Without `start`, pages through the shared schedule cursor so repeated calls keep
    extending the list. With `start`, returns that window without touching the cursor.
    """
    scheduler = get_spawn_scheduler()
    try:
        count = _int_arg('count', default=current_app.config.get('SCHEDULE_PAGE_SIZE', 3), minimum=1)
        if request.args.get('start') is not None:
            start = _int_arg('start')
            predictions = scheduler.engine.predictions(start, count)
            next_offset = start + count
        else:
            predictions = scheduler.next_predictions(count)
            next_offset = scheduler.cursor.offset
    except ValueError as e:
        logger.warning(f"Bad schedule request {dict(request.args)}: {e}")
        return jsonify({'error': str(e)}), 400

    return jsonify({
        'spawns': [p.to_dict() for p in predictions],
        'next_offset': next_offset,
    })


@bp.route('/api/spawn/schedule/reset', methods=['POST'])
def reset_schedule():
    get_spawn_scheduler().cursor.reset()
    logger.info("Schedule cursor reset via API")
    return jsonify({'next_offset': 0})


@bp.route('/api/status')
def status():
    scheduler = get_spawn_scheduler()
    countdown = get_countdown()

    # Scheduler may be disabled (or not have run yet)
    snapshot = countdown.latest or countdown.refresh()

    return jsonify({
        'countdown': snapshot.to_dict(),
        'rotation': {
            'timezone': scheduler.engine.classifier.timezone_name,
            'reference_time': scheduler.engine.anchor.time.isoformat(),
            'reference_index': scheduler.engine.anchor.index,
            'slots': [{'chest': loc.chest, 'ore': loc.ore} for loc in scheduler.engine.locations],
            'spawn_interval_minutes': scheduler.step_minutes,
            'suppressed_hour': scheduler.engine.suppressed_hour,
        },
    })
