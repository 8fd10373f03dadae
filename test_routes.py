"""Tests for the JSON spawn endpoints."""

from datetime import datetime, timedelta, timezone

import pytest

UTC = timezone.utc
REFERENCE = datetime(2025, 4, 10, 4, 0, tzinfo=UTC)


@pytest.fixture
def frozen_client(app):
    # 00:10 EDT on the reference Thursday
    app.extensions['chronorift'].engine.clock = lambda: REFERENCE + timedelta(minutes=10)
    return app.test_client()


def test_scheduler_disabled_in_tests(app):
    assert app.config['SCHEDULER_ENABLED'] is False
    assert 'chronorift' in app.extensions


def test_slot_at_offset(frozen_client):
    response = frozen_client.get('/api/spawn/slot/0')
    assert response.status_code == 200
    data = response.get_json()
    assert data['time'] == '2025-04-10T04:00:00Z'
    assert data['slot_index'] == 1
    assert data['chest'] == 'Sealed Sanctuary'
    assert data['ore'] == 'Shrine of Devotion'
    assert data['suppressed'] is False


def test_slot_at_negative_offset(frozen_client):
    response = frozen_client.get('/api/spawn/slot/-1')
    assert response.status_code == 200
    assert response.get_json()['time'] == '2025-04-10T03:00:00Z'


def test_suppressed_slot(frozen_client):
    data = frozen_client.get('/api/spawn/slot/22').get_json()
    assert data['suppressed'] is True


def test_next_spawn(frozen_client):
    data = frozen_client.get('/api/spawn/next').get_json()
    assert data['next_spawn_time'] == '2025-04-10T04:20:00+00:00'
    assert data['seconds_until'] == 600
    assert data['countdown'] == '10:00'
    assert data['location']['slot_index'] == 1


def test_schedule_pages_through_cursor(frozen_client):
    first = frozen_client.get('/api/spawn/schedule?count=2').get_json()
    second = frozen_client.get('/api/spawn/schedule').get_json()

    assert [s['time'] for s in first['spawns']] == ['2025-04-10T04:00:00Z', '2025-04-10T05:00:00Z']
    assert first['next_offset'] == 2
    # default page size is 3
    assert [s['time'] for s in second['spawns']] == [
        '2025-04-10T06:00:00Z', '2025-04-10T07:00:00Z', '2025-04-10T08:00:00Z']
    assert second['next_offset'] == 5


def test_schedule_window_does_not_move_cursor(frozen_client, app):
    data = frozen_client.get('/api/spawn/schedule?start=24&count=1').get_json()
    assert data['spawns'][0]['slot_index'] == 3
    assert data['next_offset'] == 25
    assert app.extensions['chronorift'].cursor.offset == 0


def test_schedule_reset(frozen_client, app):
    frozen_client.get('/api/spawn/schedule?count=4')
    response = frozen_client.post('/api/spawn/schedule/reset')
    assert response.get_json() == {'next_offset': 0}
    assert app.extensions['chronorift'].cursor.offset == 0


@pytest.mark.parametrize('query', ['count=0', 'count=-3', 'count=abc', 'start=x&count=2'])
def test_schedule_rejects_bad_parameters(frozen_client, query):
    response = frozen_client.get(f'/api/spawn/schedule?{query}')
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_status(frozen_client):
    data = frozen_client.get('/api/status').get_json()
    assert data['countdown']['countdown'] == '10:00'
    assert data['countdown']['next_location']['chest'] == 'Sealed Sanctuary'
    assert data['rotation']['timezone'] == 'America/New_York'
    assert data['rotation']['reference_index'] == 1
    assert data['rotation']['spawn_interval_minutes'] == 20
    assert len(data['rotation']['slots']) == 4
