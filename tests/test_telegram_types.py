import pytest

from elmonitorro.telegram_types import Chat, ChatType, Message, Update


def _message_dict(chat_type="private", **extra):
    data = {
        "message_id": 7,
        "date": 1,
        "chat": {"id": 42, "type": chat_type, "username": "Username"},
        "text": "/help",
    }
    data.update(extra)
    return data


def test_chat_from_dict():
    chat = Chat.from_dict(
        {"id": -100, "type": "supergroup", "title": "Team", "username": "team"}
    )
    assert chat.id == -100
    assert chat.type is ChatType.SUPERGROUP
    assert chat.title == "Team"
    assert chat.username == "team"
    assert chat.first_name is None


def test_chat_unknown_type():
    with pytest.raises(ValueError):
        Chat.from_dict({"id": 1, "type": "robot"})


def test_message_from_dict_with_sender_and_reply():
    data = _message_dict(**{"from": {"id": 99}, "reply_to_message": _message_dict()})
    message = Message.from_dict(data)
    assert message.message_id == 7
    assert message.text == "/help"
    assert message.from_id == 99
    assert message.chat.type is ChatType.PRIVATE
    assert message.reply_to_message is not None
    assert message.reply_to_message.chat.id == 42


def test_message_without_optional_fields():
    message = Message.from_dict({"message_id": 1, "date": 1, "chat": {"id": 5, "type": "channel"}})
    assert message.text is None
    assert message.from_id is None
    assert message.reply_to_message is None


def test_update_content_prefers_message():
    update = Update.from_dict({"update_id": 3, "message": _message_dict()})
    assert update.update_id == 3
    assert update.content == update.message
    assert update.channel_post is None


def test_update_content_channel_post():
    update = Update.from_dict({"update_id": 4, "channel_post": _message_dict("channel")})
    assert update.content is update.channel_post
    assert update.content.chat.type is ChatType.CHANNEL


def test_update_without_content():
    update = Update.from_dict({"update_id": 5, "edited_message": _message_dict()})
    assert update.content is None