"""Commands that set filters and content fields."""

from __future__ import annotations

import logging
from typing import Any

from elmonitorro import config
from elmonitorro.bot.command import Command, CommandError
from elmonitorro.bot.static_commands import UnknownCommand
from elmonitorro.storage import Storage, StorageError
from elmonitorro.telegram_types import Message

ALLOWED_CONTENT_FIELDS = (
    "link",
    "title",
    "publication_date",
    "guid",
    "description",
    "author",
)

log = logging.getLogger(__name__)


class SetFilter(Command):
    command = "/set_filter"

    def set_filter(self, store: Storage, message: Message, params: str) -> str:
        parts = params.split(" ", 1)
        if len(parts) != 2:
            return "Wrong number of parameters"
        feed_url, filter_text = parts
        if not filter_text:
            return "Filter can not be empty"
        try:
            filter_words = self.parse_filter(filter_text)
            subscription = self.find_subscription(store, message.chat.id, feed_url)
        except CommandError as err:
            return str(err)
        try:
            store.set_filter(subscription, filter_words)
        except StorageError:
            return "Failed to update the filter"
        return f"The filter was updated:\n\n{', '.join(filter_words)}"

    def response(self, store: Storage, message: Message) -> str:
        return self.set_filter(store, message, self._argument(message))


class SetGlobalFilter(Command):
    command = "/set_global_filter"

    def response(self, store: Storage, message: Message) -> str:
        chat = store.find_chat(message.chat.id)
        if chat is None:
            return "You don't have any subcriptions"
        filter_text = self._argument(message)
        if not filter_text:
            return "Filter can not be empty"
        try:
            filter_words = self.parse_filter(filter_text)
        except CommandError as err:
            return str(err)
        try:
            store.set_global_filter(chat, filter_words)
        except StorageError:
            return "Failed to update the filter"
        return f"The global filter was updated:\n\n{', '.join(filter_words)}"


class SetContentFields(Command):
    """Admin-only command choosing which item fields identify a feed's content."""

    command = "/set_content_fields"

    def set_content_fields(self, store: Storage, params: str) -> str:
        parts = params.split(" ")
        if len(parts) != 2:
            return "Wrong number of parameters"
        feed_url, fields_text = parts
        if not fields_text:
            return "Filter can not be empty"
        try:
            feed = self.find_feed(store, feed_url)
        except CommandError as err:
            return str(err)

        content_fields = [
            name
            for name in (field.strip().lower() for field in fields_text.split(","))
            if name in ALLOWED_CONTENT_FIELDS
        ]
        if not content_fields:
            return "Invalid content fields"

        try:
            store.set_content_fields(feed, content_fields)
        except StorageError:
            return "Failed to update the content fields"
        return f"Content fields were updated:\n\n{', '.join(content_fields)}"

    def execute(self, store: Storage, api: Any, message: Message) -> None:
        admin_id = config.admin_telegram_id()
        if admin_id is None or admin_id != message.chat.id:
            UnknownCommand().execute(store, api, message)
            return
        super().execute(store, api, message)

    def response(self, store: Storage, message: Message) -> str:
        return self.set_content_fields(store, self._argument(message))