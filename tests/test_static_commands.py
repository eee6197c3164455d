import pytest

from elmonitorro.bot.static_commands import (
    HELP,
    START,
    UNKNOWN_COMMAND_GROUP,
    UNKNOWN_COMMAND_PRIVATE,
    Help,
    Start,
    UnknownCommand,
)
from elmonitorro.storage import Storage
from elmonitorro.telegram_types import Chat, ChatType, Message


class FakeApi:
    def __init__(self):
        self.sent = []

    def send_message(self, chat_id, text, reply_to_message_id=None):
        self.sent.append((chat_id, text, reply_to_message_id))


def make_message(text, chat_type=ChatType.PRIVATE, reply=None):
    return Message(
        message_id=3,
        date=1,
        chat=Chat(id=42, type=chat_type),
        text=text,
        reply_to_message=reply,
    )


def test_help_lists_commands():
    text = Help().response(Storage(), make_message("/help"))
    assert text == HELP
    assert text.startswith("/start - show the description of the bot")
    assert "/subscribe url - subscribe to the feed\n\n" in text


def test_start_mentions_help():
    text = Start().response(Storage(), make_message("/start"))
    assert text == START
    assert "Use /help to see available commands." in text


def test_unknown_private():
    assert UnknownCommand().response(Storage(), make_message("hi")) == UNKNOWN_COMMAND_PRIVATE


@pytest.mark.parametrize("chat_type", [ChatType.GROUP, ChatType.SUPERGROUP])
def test_unknown_group_plain_text(chat_type):
    message = make_message("hi", chat_type)
    assert UnknownCommand().response(Storage(), message) == UNKNOWN_COMMAND_GROUP


def test_unknown_group_slash_is_silent():
    message = make_message("/whatever", ChatType.GROUP)
    assert UnknownCommand().response(Storage(), message) == ""


def test_unknown_group_reply_is_silent():
    reply = make_message("earlier", ChatType.GROUP)
    message = make_message("hi", ChatType.GROUP, reply=reply)
    assert UnknownCommand().response(Storage(), message) == ""


def test_unknown_channel_is_silent():
    message = make_message("hi", ChatType.CHANNEL)
    assert UnknownCommand().response(Storage(), message) == ""


def test_execute_skips_empty_reply():
    api = FakeApi()
    UnknownCommand().execute(Storage(), api, make_message("hi", ChatType.CHANNEL))
    assert api.sent == []


def test_execute_replies_in_private_chat():
    api = FakeApi()
    UnknownCommand().execute(Storage(), api, make_message("hi"))
    assert api.sent == [(42, UNKNOWN_COMMAND_PRIVATE, 3)]