import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest

from app.core.exceptions import Conflict, Forbidden, NotFound
from app.crud import location_update_crud, notification_crud
from app.schema.tracking import (
    LocationIn,
    LocationUpdateBody,
    TrackingSettingsIn,
    TrackingStartBody,
    TrackingTarget,
)
from app.service.tracking_service import TrackingService, can_view_tracking, compute_tracking_stats
from app.utils.dates import utcnow


def test_stats_for_empty_route():
    assert compute_tracking_stats([]) == {
        "duration": 0,
        "total_distance": 0,
        "average_speed": 0,
        "max_speed": 0,
        "points_count": 0,
    }


def test_stats_skip_first_speed_and_zero_speeds():
    start = utcnow().replace(microsecond=0)
    points = [
        SimpleNamespace(latitude=0.0, longitude=0.0, speed=99.0, timestamp=start),
        SimpleNamespace(latitude=0.0, longitude=0.01, speed=2.0, timestamp=start + timedelta(seconds=60)),
        SimpleNamespace(latitude=0.0, longitude=0.02, speed=0.0, timestamp=start + timedelta(seconds=120)),
        SimpleNamespace(latitude=0.0, longitude=0.03, speed=5.0, timestamp=start + timedelta(seconds=180)),
    ]
    stats = compute_tracking_stats(points)
    assert stats["duration"] == 180
    assert stats["points_count"] == 4
    assert stats["average_speed"] == 3.5
    assert stats["max_speed"] == 5.0
    # 0.03 degrees of longitude on the equator
    assert 3330 <= stats["total_distance"] <= 3340


def test_can_view_tracking_rules():
    master_id, client_id, other_id = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    open_session = SimpleNamespace(master_id=master_id, client_id=None, share_with_client=True)
    named = SimpleNamespace(master_id=master_id, client_id=client_id, share_with_client=True)
    private = SimpleNamespace(master_id=master_id, client_id=client_id, share_with_client=False)

    assert can_view_tracking(open_session, master_id, "MASTER")
    assert can_view_tracking(open_session, other_id, "ADMIN")
    assert can_view_tracking(open_session, other_id, "CLIENT")
    assert not can_view_tracking(open_session, other_id, "MASTER")
    assert can_view_tracking(named, client_id, "CLIENT")
    assert not can_view_tracking(named, other_id, "CLIENT")
    assert not can_view_tracking(private, client_id, "CLIENT")
    assert can_view_tracking(private, master_id, "MASTER")
    assert not can_view_tracking(open_session, None, None)


@pytest.fixture
def master(make_user):
    return make_user(role="MASTER")


def test_start_requires_master(db, make_user):
    client = make_user()
    with pytest.raises(Forbidden):
        TrackingService(db).start(client.id, "CLIENT", TrackingStartBody(booking_id=uuid.uuid4()))


def test_start_rejects_duplicate_active_session(db, master):
    booking_id = uuid.uuid4()
    service = TrackingService(db)
    started = service.start(master.id, "MASTER", TrackingStartBody(booking_id=booking_id))
    assert started.tracking.status == "ACTIVE"
    assert started.tracking_url == f"https://app.example.com/tracking/{started.tracking.id}"

    with pytest.raises(Conflict):
        service.start(master.id, "MASTER", TrackingStartBody(booking_id=booking_id))
    # a different booking is fine
    service.start(master.id, "MASTER", TrackingStartBody(booking_id=uuid.uuid4()))


def test_start_needs_a_target():
    with pytest.raises(ValueError, match="Booking ID or Project ID is required"):
        TrackingStartBody()


def test_start_notifies_client(db, master, make_user):
    client = make_user()
    TrackingService(db).start(
        master.id, "MASTER", TrackingStartBody(project_id=uuid.uuid4(), client_id=client.id)
    )
    items, total = notification_crud.list_for_user(db, user_id=client.id)
    assert total == 1
    assert items[0].notification_type == "LOCATION"
    assert items[0].data["event"] == "TRACKING_STARTED"


def test_start_does_not_notify_when_not_shared(db, master, make_user):
    client = make_user()
    TrackingService(db).start(
        master.id,
        "MASTER",
        TrackingStartBody(
            booking_id=uuid.uuid4(),
            client_id=client.id,
            settings=TrackingSettingsIn(share_with_client=False),
        ),
    )
    assert notification_crud.count_unread(db, user_id=client.id) == 0


def test_update_location_moves_current_position(db, master):
    booking_id = uuid.uuid4()
    service = TrackingService(db)
    started = service.start(
        master.id, "MASTER", TrackingStartBody(booking_id=booking_id, location=LocationIn(latitude=1, longitude=1))
    )
    result = service.update_location(
        master.id,
        "MASTER",
        LocationUpdateBody(booking_id=booking_id, location=LocationIn(latitude=1.001, longitude=1, speed=3)),
    )
    assert result.tracking_id == started.tracking.id

    current = service.current_location(started.tracking.id, master.id, "MASTER")
    assert current.location.latitude == 1.001
    assert current.location.speed == 3
    assert len(location_update_crud.list_for_tracking(db, tracking_id=started.tracking.id)) == 2


def test_update_without_active_session(db, master):
    with pytest.raises(NotFound):
        TrackingService(db).update_location(
            master.id,
            "MASTER",
            LocationUpdateBody(booking_id=uuid.uuid4(), location=LocationIn(latitude=0, longitude=0)),
        )


def test_stop_completes_and_stores_stats(db, master):
    booking_id = uuid.uuid4()
    service = TrackingService(db)
    service.start(
        master.id, "MASTER", TrackingStartBody(booking_id=booking_id, location=LocationIn(latitude=0, longitude=0))
    )
    service.update_location(
        master.id,
        "MASTER",
        LocationUpdateBody(booking_id=booking_id, location=LocationIn(latitude=0, longitude=0.01, speed=4)),
    )
    stopped = service.stop(master.id, "MASTER", TrackingTarget(booking_id=booking_id))
    assert stopped.status == "COMPLETED"
    assert stopped.ended_at is not None
    assert stopped.stats.points_count == 2
    assert stopped.stats.max_speed == 4

    with pytest.raises(NotFound):
        service.stop(master.id, "MASTER", TrackingTarget(booking_id=booking_id))
    # a new session can start once the old one is completed
    service.start(master.id, "MASTER", TrackingStartBody(booking_id=booking_id))


def test_history_permissions(db, master, make_user):
    client, stranger = make_user(), make_user()
    service = TrackingService(db)
    started = service.start(
        master.id,
        "MASTER",
        TrackingStartBody(
            booking_id=uuid.uuid4(), client_id=client.id, location=LocationIn(latitude=5, longitude=5)
        ),
    )
    history = service.history(started.tracking.id, client.id, "CLIENT")
    assert len(history.location_history) == 1
    assert history.route_stats.points_count == 1

    with pytest.raises(Forbidden):
        service.history(started.tracking.id, stranger.id, "CLIENT")
    with pytest.raises(NotFound):
        service.current_location(uuid.uuid4(), master.id, "MASTER")
