from datetime import datetime, timedelta, timezone

import pytest

from elmonitorro.storage import (
    NewTelegramChat,
    NewTelegramSubscription,
    Storage,
    StorageError,
    current_time,
)
from elmonitorro.telegram_types import Chat, ChatType


def _new_chat(chat_id=42, kind="private"):
    return NewTelegramChat(
        id=chat_id,
        kind=kind,
        username="Username",
        first_name="First",
        last_name="Last",
        title=None,
    )


@pytest.fixture
def store():
    return Storage()


def _subscribe(store, chat_id, link):
    store.create_chat(_new_chat(chat_id))
    feed = store.create_feed(link, "rss")
    return store.create_subscription(NewTelegramSubscription(chat_id=chat_id, feed_id=feed.id))


def test_current_time_is_whole_seconds():
    now = current_time()
    assert now.microsecond == 0
    assert now.tzinfo == timezone.utc
    assert abs(datetime.now(timezone.utc) - now) <= timedelta(seconds=1)


def test_from_chat_maps_kind():
    chat = Chat(id=-5, type=ChatType.SUPERGROUP, title="Team")
    new_chat = NewTelegramChat.from_chat(chat)
    assert new_chat.kind == "supergroup"
    assert new_chat.id == -5
    assert new_chat.title == "Team"


def test_create_chat_is_upsert(store):
    store.create_chat(_new_chat())
    updated = store.create_chat(NewTelegramChat(id=42, kind="private", username="Other"))
    assert updated.username == "Other"
    assert store.find_chat(42) == updated
    assert store.find_chat(7) is None


def test_create_feed_reuses_link(store):
    first = store.create_feed("link1", "rss")
    second = store.create_feed("link1", "rss")
    assert first.id == second.id
    assert store.find_feed_by_link("link1") == first
    assert store.find_feed_by_link("missing") is None


def test_subscription_lifecycle(store):
    subscription = _subscribe(store, 42, "link1")
    key = NewTelegramSubscription(chat_id=42, feed_id=subscription.feed_id)
    assert store.find_subscription(key) == subscription
    with pytest.raises(StorageError):
        store.create_subscription(key)
    assert store.remove_subscription(key) == 1
    assert store.find_subscription(key) is None
    assert store.remove_subscription(key) == 0


def test_subscription_requires_chat_and_feed(store):
    with pytest.raises(StorageError):
        store.create_subscription(NewTelegramSubscription(chat_id=1, feed_id=1))


def test_feeds_by_chat_keep_subscription_order(store):
    links = ["link1", "link2"]
    for link in links:
        _subscribe(store, 42, link)
    assert [feed.link for feed in store.find_feeds_by_chat_id(42)] == links
    assert store.count_subscriptions_for_chat(42) == len(links)
    assert store.find_feeds_by_chat_id(99) == []


def test_filters_and_templates(store):
    subscription = _subscribe(store, 42, "link1")
    updated = store.set_filter(subscription, ["telegram", "bots"])
    assert updated.filter_words == ("telegram", "bots")
    assert store.set_template(updated, "{{bot_item_name}}").template == "{{bot_item_name}}"
    assert store.set_filter(updated, None).filter_words is None

    chat = store.find_chat(42)
    assert store.set_global_filter(chat, ["rust"]).filter_words == ("rust",)
    assert store.set_global_template(chat, "tpl").template == "tpl"
    assert store.set_utc_offset_minutes(chat, 600).utc_offset_minutes == 600
    assert store.find_chat(42).template == "tpl"


def test_set_content_fields(store):
    feed = store.create_feed("link1", "rss")
    updated = store.set_content_fields(feed, ["link", "title"])
    assert updated.content_fields == ("link", "title")
    assert store.find_feed(feed.id).content_fields == ("link", "title")


def test_transaction_rolls_back(store):
    with pytest.raises(RuntimeError):
        with store.transaction():
            _subscribe(store, 42, "link1")
            raise RuntimeError("abort")
    assert store.find_chat(42) is None
    assert store.find_feed_by_link("link1") is None
    assert store.fetch_subscriptions(1, 1000) == []


def test_transaction_commits(store):
    with store.transaction():
        _subscribe(store, 42, "link1")
    assert store.fetch_chats_with_subscriptions(1, 1) == [42]


def test_pagination(store):
    ids = [store.create_feed(f"link{n}", "rss").id for n in range(5)]
    pages = [store.load_feed_ids(page, 2) for page in (1, 2, 3, 4)]
    assert [feed_id for page in pages for feed_id in page] == ids
    assert pages[-1] == []
    with pytest.raises(StorageError):
        store.load_feed_ids(0, 2)


def test_counts(store):
    _subscribe(store, 1, "link1")
    _subscribe(store, 2, "link1")
    store.create_chat(_new_chat(3, kind="group"))
    store.create_feed("orphan", "rss")
    assert store.count_chats_with_subscriptions() == 2
    assert store.count_feeds_with_subscriptions() == 1
    assert store.count_chats_of_type("group") == 1
    assert store.delete_feeds_without_subscriptions() == 1
    assert store.find_feed_by_link("orphan") is None


def test_delete_old_feed_items_keeps_newest(store):
    feed = store.create_feed("link1", "rss")
    base = datetime(2021, 1, 1, tzinfo=timezone.utc)
    links = [f"item{n}" for n in range(5)]
    for n, link in enumerate(links):
        store.add_feed_item(feed.id, link, publication_date=base + timedelta(minutes=n))
    limit = 2
    removed = store.delete_old_feed_items(feed.id, limit)
    assert removed + limit == len(links)
    assert store.feed_item_links(feed.id) == list(reversed(links))[:limit]
    assert store.count_feed_items(feed.id) == limit