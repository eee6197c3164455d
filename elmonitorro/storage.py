"""In-memory storage of chats, feeds, subscriptions and feed items."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Iterable, Iterator

from elmonitorro.telegram_types import Chat


def current_time() -> datetime:
    """The current UTC time rounded to whole seconds."""
    now = datetime.now(timezone.utc)
    if now.microsecond >= 500_000:
        now += timedelta(seconds=1)
    return now.replace(microsecond=0)


class StorageError(Exception):
    """Raised when a storage operation violates a constraint."""


@dataclass(frozen=True)
class Feed:
    id: int
    link: str
    feed_type: str
    content_fields: tuple[str, ...] | None = None
    created_at: datetime = field(default_factory=current_time)
    updated_at: datetime = field(default_factory=current_time)


@dataclass(frozen=True)
class TelegramChat:
    id: int
    kind: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    title: str | None = None
    utc_offset_minutes: int | None = None
    template: str | None = None
    filter_words: tuple[str, ...] | None = None
    created_at: datetime = field(default_factory=current_time)
    updated_at: datetime = field(default_factory=current_time)


@dataclass(frozen=True)
class TelegramSubscription:
    chat_id: int
    feed_id: int
    template: str | None = None
    filter_words: tuple[str, ...] | None = None
    created_at: datetime = field(default_factory=current_time)
    updated_at: datetime = field(default_factory=current_time)


@dataclass(frozen=True)
class NewTelegramChat:
    id: int
    kind: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    title: str | None = None

    @classmethod
    def from_chat(cls, chat: Chat) -> NewTelegramChat:
        return cls(
            id=chat.id,
            kind=chat.type.value,
            username=chat.username,
            first_name=chat.first_name,
            last_name=chat.last_name,
            title=chat.title,
        )


@dataclass(frozen=True)
class NewTelegramSubscription:
    chat_id: int
    feed_id: int


@dataclass(frozen=True)
class _FeedItem:
    seq: int
    feed_id: int
    link: str
    title: str | None
    publication_date: datetime


def _words(words: Iterable[str] | None) -> tuple[str, ...] | None:
    return None if words is None else tuple(words)


def _page(items: list, page: int, per_page: int) -> list:
    if page < 1 or per_page < 0:
        raise StorageError(f"invalid page {page} with {per_page} per page")
    start = (page - 1) * per_page
    return items[start : start + per_page]


class Storage:
    """Thread-safe store with transactional rollback."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._chats: dict[int, TelegramChat] = {}
        self._feeds: dict[int, Feed] = {}
        self._subscriptions: dict[tuple[int, int], TelegramSubscription] = {}
        self._items: dict[int, list[_FeedItem]] = {}
        self._next_feed_id = 1
        self._next_item_seq = 1

    @contextmanager
    def transaction(self) -> Iterator[Storage]:
        """Run a block atomically; any exception undoes its changes."""
        with self._lock:
            snapshot = (
                dict(self._chats),
                dict(self._feeds),
                dict(self._subscriptions),
                {key: list(items) for key, items in self._items.items()},
                self._next_feed_id,
                self._next_item_seq,
            )
            try:
                yield self
            except BaseException:
                (
                    self._chats,
                    self._feeds,
                    self._subscriptions,
                    self._items,
                    self._next_feed_id,
                    self._next_item_seq,
                ) = snapshot
                raise

    # chats

    def create_chat(self, new_chat: NewTelegramChat) -> TelegramChat:
        with self._lock:
            existing = self._chats.get(new_chat.id)
            if existing is None:
                chat = TelegramChat(
                    id=new_chat.id,
                    kind=new_chat.kind,
                    username=new_chat.username,
                    first_name=new_chat.first_name,
                    last_name=new_chat.last_name,
                    title=new_chat.title,
                )
            else:
                chat = replace(
                    existing,
                    kind=new_chat.kind,
                    username=new_chat.username,
                    first_name=new_chat.first_name,
                    last_name=new_chat.last_name,
                    title=new_chat.title,
                    updated_at=current_time(),
                )
            self._chats[chat.id] = chat
            return chat

    def find_chat(self, chat_id: int) -> TelegramChat | None:
        with self._lock:
            return self._chats.get(chat_id)

    def _update_chat(self, chat: TelegramChat, **changes) -> TelegramChat:
        with self._lock:
            current = self._chats.get(chat.id)
            if current is None:
                raise StorageError(f"chat {chat.id} does not exist")
            updated = replace(current, updated_at=current_time(), **changes)
            self._chats[chat.id] = updated
            return updated

    def set_global_filter(
        self, chat: TelegramChat, filter_words: Iterable[str] | None
    ) -> TelegramChat:
        return self._update_chat(chat, filter_words=_words(filter_words))

    def set_global_template(self, chat: TelegramChat, template: str | None) -> TelegramChat:
        return self._update_chat(chat, template=template)

    def set_utc_offset_minutes(self, chat: TelegramChat, offset: int) -> TelegramChat:
        return self._update_chat(chat, utc_offset_minutes=offset)

    def count_chats_with_subscriptions(self) -> int:
        with self._lock:
            return len({chat_id for chat_id, _ in self._subscriptions})

    def count_chats_of_type(self, kind: str) -> int:
        with self._lock:
            return sum(1 for chat in self._chats.values() if chat.kind == kind)

    def fetch_chats_with_subscriptions(self, page: int, per_page: int) -> list[int]:
        with self._lock:
            chat_ids = sorted({chat_id for chat_id, _ in self._subscriptions})
            return _page(chat_ids, page, per_page)

    # feeds

    def create_feed(self, link: str, feed_type: str) -> Feed:
        with self._lock:
            existing = self.find_feed_by_link(link)
            if existing is not None:
                if existing.feed_type != feed_type:
                    existing = replace(existing, feed_type=feed_type, updated_at=current_time())
                    self._feeds[existing.id] = existing
                return existing
            feed = Feed(id=self._next_feed_id, link=link, feed_type=feed_type)
            self._next_feed_id += 1
            self._feeds[feed.id] = feed
            return feed

    def find_feed(self, feed_id: int) -> Feed | None:
        with self._lock:
            return self._feeds.get(feed_id)

    def find_feed_by_link(self, link: str) -> Feed | None:
        with self._lock:
            return next((feed for feed in self._feeds.values() if feed.link == link), None)

    def set_content_fields(self, feed: Feed, content_fields: Iterable[str]) -> Feed:
        with self._lock:
            current = self._feeds.get(feed.id)
            if current is None:
                raise StorageError(f"feed {feed.id} does not exist")
            updated = replace(
                current, content_fields=tuple(content_fields), updated_at=current_time()
            )
            self._feeds[feed.id] = updated
            return updated

    def load_feed_ids(self, page: int, per_page: int) -> list[int]:
        with self._lock:
            return _page(sorted(self._feeds), page, per_page)

    def count_feeds_with_subscriptions(self) -> int:
        with self._lock:
            return len({feed_id for _, feed_id in self._subscriptions})

    def delete_feeds_without_subscriptions(self) -> int:
        with self._lock:
            subscribed = {feed_id for _, feed_id in self._subscriptions}
            orphans = [feed_id for feed_id in self._feeds if feed_id not in subscribed]
            for feed_id in orphans:
                del self._feeds[feed_id]
                self._items.pop(feed_id, None)
            return len(orphans)

    # subscriptions

    def create_subscription(self, new_subscription: NewTelegramSubscription) -> TelegramSubscription:
        key = (new_subscription.chat_id, new_subscription.feed_id)
        with self._lock:
            if new_subscription.chat_id not in self._chats:
                raise StorageError(f"chat {new_subscription.chat_id} does not exist")
            if new_subscription.feed_id not in self._feeds:
                raise StorageError(f"feed {new_subscription.feed_id} does not exist")
            if key in self._subscriptions:
                raise StorageError("subscription already exists")
            subscription = TelegramSubscription(chat_id=key[0], feed_id=key[1])
            self._subscriptions[key] = subscription
            return subscription

    def find_subscription(
        self, subscription: NewTelegramSubscription
    ) -> TelegramSubscription | None:
        with self._lock:
            return self._subscriptions.get((subscription.chat_id, subscription.feed_id))

    def remove_subscription(self, subscription: NewTelegramSubscription) -> int:
        with self._lock:
            removed = self._subscriptions.pop((subscription.chat_id, subscription.feed_id), None)
            return 0 if removed is None else 1

    def _update_subscription(
        self, subscription: TelegramSubscription, **changes
    ) -> TelegramSubscription:
        key = (subscription.chat_id, subscription.feed_id)
        with self._lock:
            current = self._subscriptions.get(key)
            if current is None:
                raise StorageError("subscription does not exist")
            updated = replace(current, updated_at=current_time(), **changes)
            self._subscriptions[key] = updated
            return updated

    def set_filter(
        self, subscription: TelegramSubscription, filter_words: Iterable[str] | None
    ) -> TelegramSubscription:
        return self._update_subscription(subscription, filter_words=_words(filter_words))

    def set_template(
        self, subscription: TelegramSubscription, template: str | None
    ) -> TelegramSubscription:
        return self._update_subscription(subscription, template=template)

    def count_subscriptions_for_chat(self, chat_id: int) -> int:
        with self._lock:
            return sum(1 for key in self._subscriptions if key[0] == chat_id)

    def find_feeds_by_chat_id(self, chat_id: int) -> list[Feed]:
        with self._lock:
            return [
                self._feeds[feed_id]
                for (sub_chat_id, feed_id) in self._subscriptions
                if sub_chat_id == chat_id
            ]

    def fetch_subscriptions(self, page: int, per_page: int) -> list[TelegramSubscription]:
        with self._lock:
            return _page(list(self._subscriptions.values()), page, per_page)

    # feed items

    def add_feed_item(
        self,
        feed_id: int,
        link: str,
        title: str | None = None,
        publication_date: datetime | None = None,
    ) -> None:
        with self._lock:
            if feed_id not in self._feeds:
                raise StorageError(f"feed {feed_id} does not exist")
            item = _FeedItem(
                seq=self._next_item_seq,
                feed_id=feed_id,
                link=link,
                title=title,
                publication_date=publication_date or current_time(),
            )
            self._next_item_seq += 1
            self._items.setdefault(feed_id, []).append(item)

    def _newest_first(self, feed_id: int) -> list[_FeedItem]:
        return sorted(
            self._items.get(feed_id, []),
            key=lambda item: (item.publication_date, item.seq),
            reverse=True,
        )

    def feed_item_links(self, feed_id: int) -> list[str]:
        """Links of a feed's items, newest first."""
        with self._lock:
            return [item.link for item in self._newest_first(feed_id)]

    def count_feed_items(self, feed_id: int) -> int:
        with self._lock:
            return len(self._items.get(feed_id, []))

    def delete_old_feed_items(self, feed_id: int, limit: int) -> int:
        """Keep only the newest `limit` items of a feed; return how many were removed."""
        if limit < 0:
            raise StorageError("limit must not be negative")
        with self._lock:
            items = self._newest_first(feed_id)
            kept, removed = items[:limit], items[limit:]
            if removed:
                self._items[feed_id] = sorted(kept, key=lambda item: item.seq)
            return len(removed)