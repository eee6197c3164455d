"""The common behaviour of bot commands."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from elmonitorro import config
from elmonitorro.storage import Feed, NewTelegramSubscription, Storage, TelegramSubscription
from elmonitorro.telegram_client import TelegramError
from elmonitorro.telegram_types import Message

MAX_FILTER_WORDS = 7

log = logging.getLogger(__name__)


class CommandError(Exception):
    """A problem with a command whose message is sent back to the user."""


class Command(ABC):
    """A bot command: computes a text response and replies with it."""

    command: str = ""

    @abstractmethod
    def response(self, store: Storage, message: Message) -> str:
        """The text to send back for the message."""

    def execute(self, store: Storage, api: Any, message: Message) -> None:
        log.info("%s wrote: %s", message.chat.id, message.text)
        text = self.response(store, message)
        self.reply_to_message(api, message, text)

    def reply_to_message(self, api: Any, message: Message, text: str) -> None:
        try:
            api.send_message(message.chat.id, text, message.message_id)
        except TelegramError as err:
            log.error("Failed to send a message %r: chat %s", err, message.chat.id)

    def parse_argument(self, full_command: str) -> str:
        """The text after the command name, with an optional @handle removed."""
        command_with_handle = f"{self.command}@{config.telegram_bot_handle()}"
        if full_command.startswith(command_with_handle):
            return full_command.replace(command_with_handle, "").strip()
        return full_command.replace(self.command, "").strip()

    def _argument(self, message: Message) -> str:
        return self.parse_argument(message.text or "")

    def find_subscription(
        self, store: Storage, chat_id: int, feed_url: str
    ) -> TelegramSubscription:
        feed = self.find_feed(store, feed_url)
        chat = store.find_chat(chat_id)
        if chat is None:
            raise CommandError("Subscription does not exist")
        subscription = store.find_subscription(
            NewTelegramSubscription(chat_id=chat.id, feed_id=feed.id)
        )
        if subscription is None:
            raise CommandError("Subscription does not exist")
        return subscription

    def find_feed(self, store: Storage, feed_url: str) -> Feed:
        feed = store.find_feed_by_link(feed_url)
        if feed is None:
            raise CommandError("Feed does not exist")
        return feed

    def parse_filter(self, params: str) -> list[str]:
        """Split comma separated filter words, trimmed and lower-cased."""
        words = [word.strip().lower() for word in params.split(",")]
        if len(words) > MAX_FILTER_WORDS:
            raise CommandError("The number of filter words is limited by 7")
        return words