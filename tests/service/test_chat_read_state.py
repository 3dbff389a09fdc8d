import uuid

import pytest

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.crud import chat_participant_crud
from app.schema.chat import MessageCreateBody
from app.service.chat_service import ChatService


@pytest.fixture
def room(db, make_user):
    alice = make_user(role="CLIENT")
    bob = make_user(role="MASTER")
    room, _ = ChatService(db).create_or_get_direct_room(alice.id, bob.id)
    return room, alice, bob


def _unread(db, room_id, user_id):
    db.expire_all()
    return chat_participant_crud.get_by_room_and_user(db, room_id=room_id, user_id=user_id).unread_count


def _send(db, room_id, sender_id, text="hi"):
    return ChatService(db).send_message(sender_id, room_id, MessageCreateBody(content=text))


def test_create_or_get_returns_same_room(db, room):
    created, alice, bob = room
    again, is_new = ChatService(db).create_or_get_direct_room(bob.id, alice.id)
    assert is_new is False
    assert again.id == created.id
    assert again.other_participants[0].user_id == alice.id


def test_order_scoped_rooms_are_separate(db, room):
    created, alice, bob = room
    order_room, is_new = ChatService(db).create_or_get_direct_room(alice.id, bob.id, order_id=uuid.uuid4())
    assert is_new is True
    assert order_room.id != created.id


def test_cannot_chat_with_yourself(db, make_user):
    user = make_user()
    with pytest.raises(ValidationError):
        ChatService(db).create_or_get_direct_room(user.id, user.id)


def test_unknown_other_user(db, make_user):
    user = make_user()
    with pytest.raises(NotFound):
        ChatService(db).create_or_get_direct_room(user.id, uuid.uuid4())


def test_send_increments_only_other_participants(db, room):
    created, alice, bob = room
    _send(db, created.id, alice.id)
    _send(db, created.id, alice.id)
    assert _unread(db, created.id, bob.id) == 2
    assert _unread(db, created.id, alice.id) == 0


def test_single_read_is_idempotent_and_never_negative(db, room):
    created, alice, bob = room
    msg = _send(db, created.id, alice.id)
    service = ChatService(db)

    first = service.mark_message_read(bob.id, msg.id)
    assert first.is_read is True
    assert first.unread_count == 0

    second = service.mark_message_read(bob.id, msg.id)
    assert second.is_read is True
    assert second.unread_count == 0
    assert _unread(db, created.id, bob.id) == 0


def test_single_read_after_room_read_does_not_go_negative(db, room):
    created, alice, bob = room
    msg = _send(db, created.id, alice.id)
    service = ChatService(db)
    service.mark_room_read(bob.id, created.id)
    result = service.mark_message_read(bob.id, msg.id)
    assert result.unread_count == 0


def test_single_read_only_decrements_by_one(db, room):
    created, alice, bob = room
    first = _send(db, created.id, alice.id, "one")
    _send(db, created.id, alice.id, "two")
    _send(db, created.id, alice.id, "three")
    result = ChatService(db).mark_message_read(bob.id, first.id)
    assert result.unread_count == 2


def test_reading_own_message_changes_nothing(db, room):
    created, alice, bob = room
    msg = _send(db, created.id, alice.id)
    result = ChatService(db).mark_message_read(alice.id, msg.id)
    assert result.is_read is False
    assert _unread(db, created.id, alice.id) == 0
    assert _unread(db, created.id, bob.id) == 1


def test_read_by_non_participant_is_forbidden(db, room, make_user):
    created, alice, bob = room
    msg = _send(db, created.id, alice.id)
    outsider = make_user()
    with pytest.raises(Forbidden):
        ChatService(db).mark_message_read(outsider.id, msg.id)


def test_read_missing_message(db, room):
    created, alice, bob = room
    with pytest.raises(NotFound):
        ChatService(db).mark_message_read(bob.id, uuid.uuid4())


def test_room_read_always_resets_to_zero(db, room):
    created, alice, bob = room
    for i in range(4):
        _send(db, created.id, alice.id, f"m{i}")
    result = ChatService(db).mark_room_read(bob.id, created.id)
    assert result.marked_count == 4
    assert result.unread_count == 0
    assert _unread(db, created.id, bob.id) == 0
    assert ChatService(db).unread_total(bob.id) == 0

    again = ChatService(db).mark_room_read(bob.id, created.id)
    assert again.marked_count == 0
    assert _unread(db, created.id, bob.id) == 0


def test_room_read_leaves_own_messages_for_the_other_side(db, room):
    created, alice, bob = room
    _send(db, created.id, alice.id)
    _send(db, created.id, bob.id)
    ChatService(db).mark_room_read(bob.id, created.id)
    assert _unread(db, created.id, alice.id) == 1
    assert ChatService(db).unread_total(alice.id) == 1


def test_room_read_errors(db, room, make_user):
    created, alice, bob = room
    with pytest.raises(NotFound):
        ChatService(db).mark_room_read(bob.id, uuid.uuid4())
    with pytest.raises(Forbidden):
        ChatService(db).mark_room_read(make_user().id, created.id)


def test_unread_total_matches_counters(db, room, make_user):
    created, alice, bob = room
    carol = make_user()
    other, _ = ChatService(db).create_or_get_direct_room(carol.id, bob.id)
    _send(db, created.id, alice.id)
    _send(db, other.id, carol.id)
    _send(db, other.id, carol.id)
    assert ChatService(db).unread_total(bob.id) == 3
    rooms = ChatService(db).list_rooms(bob.id)
    assert sum(r.unread_count for r in rooms.items) == 3


def test_list_messages_marks_room_read(db, room):
    created, alice, bob = room
    _send(db, created.id, alice.id, "first")
    _send(db, created.id, alice.id, "second")
    page = ChatService(db).list_messages(bob.id, created.id)
    assert [m.content for m in page.items] == ["second", "first"]
    assert page.total == 2
    assert _unread(db, created.id, bob.id) == 0


def test_before_id_cursor(db, room):
    created, alice, bob = room
    sent = [_send(db, created.id, alice.id, f"m{i}") for i in range(3)]
    page = ChatService(db).list_messages(bob.id, created.id, before_id=sent[2].id)
    assert [m.content for m in page.items] == ["m1", "m0"]


def test_send_updates_room_preview(db, room):
    created, alice, bob = room
    _send(db, created.id, alice.id, "x" * 300)
    fetched = ChatService(db).get_room(bob.id, created.id)
    assert len(fetched.last_message) == 200
    assert fetched.last_message.endswith("...")
    assert fetched.last_message_at is not None
    assert fetched.unread_count == 1


def test_reply_must_be_in_same_room(db, room, make_user):
    created, alice, bob = room
    other, _ = ChatService(db).create_or_get_direct_room(alice.id, make_user().id)
    foreign = _send(db, other.id, alice.id)
    with pytest.raises(ValidationError):
        ChatService(db).send_message(
            alice.id, created.id, MessageCreateBody(content="re", reply_to_id=foreign.id)
        )


def test_send_notifies_other_participant(db, room):
    from app.service.notification_service import NotificationService

    created, alice, bob = room
    _send(db, created.id, alice.id, "hello bob")
    listing = NotificationService(db).list_notifications(bob.id)
    assert listing.total == 1
    assert listing.items[0].notification_type == "CHAT"
    assert listing.items[0].message == "hello bob"
    assert NotificationService(db).unread_count(alice.id) == 0


def test_outsider_listing_messages_sees_no_room(db, room, make_user):
    created, alice, bob = room
    _send(db, created.id, alice.id)
    with pytest.raises(NotFound):
        ChatService(db).list_messages(make_user().id, created.id)
    assert _unread(db, created.id, bob.id) == 1
