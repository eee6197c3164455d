"""Admin-only command that reports usage statistics."""

from __future__ import annotations

import logging
from typing import Any

from elmonitorro import config
from elmonitorro.bot.command import Command
from elmonitorro.bot.static_commands import UnknownCommand
from elmonitorro.storage import Storage, StorageError
from elmonitorro.telegram_types import Message

CHAT_KINDS = ("private", "group", "supergroup", "channel")

log = logging.getLogger(__name__)


class Info(Command):
    """Shows the number of feeds and chats; answers only the admin chat."""

    command = "/info"

    def info(self, store: Storage, message: Message) -> str:
        try:
            total_feeds = store.count_feeds_with_subscriptions()
        except StorageError as err:
            log.error("Failed to fetch total feeds count %r", err)
            return "Failed to fetch total feeds count"

        try:
            total_chats = store.count_chats_with_subscriptions()
        except StorageError as err:
            log.error("Failed to fetch total chats count %r", err)
            return "Failed to fetch total chats count"

        lines = [
            f"the number of feeds is {total_feeds}\n"
            f"the number of chats is {total_chats} \n"
        ]
        for kind in CHAT_KINDS:
            try:
                count = store.count_chats_of_type(kind)
            except StorageError as err:
                log.error("Failed to fetch %s chats count %r", kind, err)
                return "Failed to fetch chats count"
            lines.append(f"{kind} chats - {count}")

        return "\n".join(lines)

    def execute(self, store: Storage, api: Any, message: Message) -> None:
        admin_id = config.admin_telegram_id()
        if admin_id is None or admin_id != message.chat.id:
            UnknownCommand().execute(store, api, message)
            return
        super().execute(store, api, message)

    def response(self, store: Storage, message: Message) -> str:
        return self.info(store, message)