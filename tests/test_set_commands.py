import pytest

from elmonitorro.bot.command import CommandError
from elmonitorro.bot.set_commands import SetGlobalTemplate, SetTemplate, SetTimezone
from elmonitorro.storage import NewTelegramChat, NewTelegramSubscription, Storage
from elmonitorro.telegram_types import Chat, ChatType, Message

LINK = "link1"


@pytest.fixture(autouse=True)
def _no_handle(monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_HANDLE", raising=False)


def render(template):
    if template.count("{{") != template.count("}}"):
        raise ValueError("unbalanced braces")
    return f"rendered:{template}"


def make_message(text, chat_id=42):
    return Message(
        message_id=1,
        date=1,
        chat=Chat(id=chat_id, type=ChatType.PRIVATE),
        text=text,
    )


@pytest.fixture
def store():
    storage = Storage()
    chat = storage.create_chat(NewTelegramChat(id=42, kind="private"))
    feed = storage.create_feed(LINK, "rss")
    storage.create_subscription(NewTelegramSubscription(chat_id=chat.id, feed_id=feed.id))
    return storage


def subscription_of(storage):
    feed = storage.find_feed_by_link(LINK)
    return storage.find_subscription(NewTelegramSubscription(chat_id=42, feed_id=feed.id))


def test_set_template_updates_subscription(store):
    template = "{{bot_item_name}} {{bot_date}}"
    result = SetTemplate(render).response(store, make_message(f"/set_template {LINK} {template}"))
    assert result == (
        "The template was updated. Your messages will look like:\n\n" + render(template)
    )
    assert subscription_of(store).template == template


def test_set_template_wrong_number_of_parameters(store):
    result = SetTemplate(render).response(store, make_message(f"/set_template {LINK}"))
    assert result == "Wrong number of parameters"


def test_set_template_empty(store):
    result = SetTemplate(render).response(store, make_message(f"/set_template {LINK} "))
    assert result == "Wrong number of parameters"
    assert subscription_of(store).template is None


def test_set_template_unknown_feed(store):
    result = SetTemplate(render).response(store, make_message("/set_template nope {{x}}"))
    assert result == "Feed does not exist"


def test_set_template_invalid(store):
    result = SetTemplate(render).response(store, make_message(f"/set_template {LINK} {{{{oops"))
    assert result == "The template is invalid"
    assert subscription_of(store).template is None


def test_set_global_template(store):
    result = SetGlobalTemplate(render).response(
        store, make_message("/set_global_template {{bot_feed_name}}")
    )
    assert result == (
        "The global template was updated. Your messages will look like:\n\n"
        + render("{{bot_feed_name}}")
    )
    assert store.find_chat(42).template == "{{bot_feed_name}}"


def test_set_global_template_empty(store):
    result = SetGlobalTemplate(render).response(store, make_message("/set_global_template"))
    assert result == "Template can not be empty"


def test_set_global_template_without_chat():
    result = SetGlobalTemplate(render).response(Storage(), make_message("/set_global_template x"))
    assert result == "You don't have any subcriptions"


def test_set_global_template_invalid(store):
    result = SetGlobalTemplate(render).response(store, make_message("/set_global_template {{x"))
    assert result == "The template is invalid"
    assert store.find_chat(42).template is None


@pytest.mark.parametrize("value", ["600", "-720", "840", "0", "+30"])
def test_validate_offset_accepts(value):
    assert SetTimezone().validate_offset(value) == int(value)


@pytest.mark.parametrize(
    ("value", "error"),
    [
        ("abc", "The value is not a number"),
        ("", "The value is not a number"),
        ("1.5", "The value is not a number"),
        ("99999999999", "The value is not a number"),
        ("45", "Offset must be divisible by 30"),
        ("-45", "Offset must be divisible by 30"),
        ("870", "Offset must be >= -720 (UTC -12) and <= 840 (UTC +14)"),
        ("-750", "Offset must be >= -720 (UTC -12) and <= 840 (UTC +14)"),
    ],
)
def test_validate_offset_rejects(value, error):
    with pytest.raises(CommandError) as info:
        SetTimezone().validate_offset(value)
    assert str(info.value) == error


def test_set_timezone_updates_chat(store):
    result = SetTimezone().response(store, make_message("/set_timezone 600"))
    assert result == "Your timezone was updated"
    assert store.find_chat(42).utc_offset_minutes == 600


def test_set_timezone_invalid_value(store):
    result = SetTimezone().response(store, make_message("/set_timezone 45"))
    assert result == "Offset must be divisible by 30"
    assert store.find_chat(42).utc_offset_minutes is None


def test_set_timezone_without_chat():
    result = SetTimezone().response(Storage(), make_message("/set_timezone 60"))
    assert result == (
        "You'll be able to set your timezone only after you'll have at least one subscription"
    )