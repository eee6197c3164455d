"""Commands that list, create and remove subscriptions."""

from __future__ import annotations

import logging
import re
from typing import Callable
from urllib.parse import urlsplit

from elmonitorro import config
from elmonitorro.bot.command import Command
from elmonitorro.storage import NewTelegramChat, NewTelegramSubscription, Storage, StorageError
from elmonitorro.storage import TelegramSubscription
from elmonitorro.telegram_types import Message

ValidateFeed = Callable[[str], str]
SyncFeed = Callable[[Storage, int], object]
DeliverChat = Callable[[Storage, int], object]

NO_SUBSCRIPTIONS = "You don't have any subscriptions"
SUBSCRIPTION_NOT_FOUND = "The subscription does not exist"

STORAGE_FAILURE = "Something went wrong with the bot's storage"
INVALID_URL = "Invalid url"
URL_IS_NOT_FEED = "Url is not a feed"
SUBSCRIPTION_ALREADY_EXISTS = "The subscription already exists"
SUBSCRIPTION_COUNT_LIMIT = "You exceeded the number of subscriptions"
SYNC_FAILURE = "Failed to sync your feed"

_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_SCHEMES_WITH_HOST = frozenset({"http", "https", "ftp", "ws", "wss"})

log = logging.getLogger(__name__)


class SubscriptionError(Exception):
    """Creating a subscription failed; the message is the text shown to the user."""


class _NotFound(Exception):
    pass


def _is_valid_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME.fullmatch(parts.scheme):
        return False
    if parts.scheme.lower() in _SCHEMES_WITH_HOST and not hostname:
        return False
    return True


class ListSubscriptions(Command):
    command = "/list_subscriptions"

    def list_subscriptions(self, store: Storage, message: Message) -> str:
        try:
            feeds = store.find_feeds_by_chat_id(message.chat.id)
        except StorageError:
            return "Couldn't fetch your subscriptions"
        if not feeds:
            return NO_SUBSCRIPTIONS
        return "\n".join(feed.link for feed in feeds)

    def response(self, store: Storage, message: Message) -> str:
        return self.list_subscriptions(store, message)


class Unsubscribe(Command):
    command = "/unsubscribe"

    def unsubscribe(self, store: Storage, message: Message, url: str) -> str:
        try:
            self._delete_subscription(store, message, url)
        except _NotFound:
            return SUBSCRIPTION_NOT_FOUND
        except StorageError:
            return f"Failed to unsubscribe from {url}"
        return f"Successfully unsubscribed from {url}"

    @staticmethod
    def _delete_subscription(store: Storage, message: Message, link: str) -> None:
        feed = store.find_feed_by_link(link)
        if feed is None:
            raise _NotFound("feed")
        chat = store.find_chat(message.chat.id)
        if chat is None:
            raise _NotFound("chat")
        key = NewTelegramSubscription(chat_id=chat.id, feed_id=feed.id)
        if store.find_subscription(key) is None:
            raise _NotFound("subscription")
        store.remove_subscription(key)

    def response(self, store: Storage, message: Message) -> str:
        return self.unsubscribe(store, message, self._argument(message))


class Subscribe(Command):
    """Subscribes a chat to a feed, then syncs the feed and delivers its items.

    `validate_feed` returns the feed type of a url or raises when it is not a feed;
    `sync_feed` raises when the feed can not be synced.
    """

    command = "/subscribe"

    def __init__(
        self, validate_feed: ValidateFeed, sync_feed: SyncFeed, deliver_chat: DeliverChat
    ) -> None:
        self.validate_feed = validate_feed
        self.sync_feed = sync_feed
        self.deliver_chat = deliver_chat

    def subscribe(self, store: Storage, message: Message, url: str) -> str:
        try:
            self._create_subscription(store, message, url)
        except SubscriptionError as err:
            return str(err)
        except StorageError as err:
            log.error("Failed to subscribe %s to %s: %r", message.chat.id, url, err)
            return STORAGE_FAILURE
        return f"Successfully subscribed to {url}"

    def _create_subscription(
        self, store: Storage, message: Message, url: str
    ) -> TelegramSubscription:
        feed_type = self._validate_rss_url(url)

        with store.transaction():
            chat = store.create_chat(NewTelegramChat.from_chat(message.chat))
            feed = store.create_feed(url, feed_type)
            key = NewTelegramSubscription(chat_id=chat.id, feed_id=feed.id)

            if store.find_subscription(key) is not None:
                raise SubscriptionError(SUBSCRIPTION_ALREADY_EXISTS)
            if store.count_subscriptions_for_chat(chat.id) >= config.subscription_limit():
                raise SubscriptionError(SUBSCRIPTION_COUNT_LIMIT)

            subscription = store.create_subscription(key)

            try:
                self.sync_feed(store, feed.id)
            except Exception as err:
                raise SubscriptionError(SYNC_FAILURE) from err

            self.deliver_chat(store, chat.id)
            return subscription

    def _validate_rss_url(self, url: str) -> str:
        if not _is_valid_url(url):
            raise SubscriptionError(INVALID_URL)
        try:
            return self.validate_feed(url)
        except Exception as err:
            raise SubscriptionError(URL_IS_NOT_FEED) from err

    def response(self, store: Storage, message: Message) -> str:
        return self.subscribe(store, message, self._argument(message))