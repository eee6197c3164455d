"""Receives updates and dispatches them to bot commands."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Callable

from elmonitorro import config
from elmonitorro.bot.command import Command
from elmonitorro.bot.filter_commands import SetContentFields, SetFilter, SetGlobalFilter
from elmonitorro.bot.get_commands import (
    GetFilter,
    GetGlobalFilter,
    GetGlobalTemplate,
    GetTemplate,
    GetTimezone,
)
from elmonitorro.bot.info import Info
from elmonitorro.bot.remove_commands import (
    RemoveFilter,
    RemoveGlobalFilter,
    RemoveGlobalTemplate,
    RemoveTemplate,
)
from elmonitorro.bot.set_commands import SetGlobalTemplate, SetTemplate, SetTimezone
from elmonitorro.bot.static_commands import Help, Start, UnknownCommand
from elmonitorro.bot.subscription_commands import ListSubscriptions, Subscribe, Unsubscribe
from elmonitorro.storage import Storage
from elmonitorro.telegram_types import Update

log = logging.getLogger(__name__)


class Handler:
    """Polls the API for updates and runs the matching command for each."""

    def __init__(
        self,
        api: Any,
        store: Storage,
        render_example: Callable[[str], str],
        validate_feed: Callable[[str], str],
        sync_feed: Callable[[Storage, int], object],
        deliver_chat: Callable[[Storage, int], object],
    ) -> None:
        self.api = api
        self.store = store
        self.unknown_command = UnknownCommand()
        # Matched by prefix in this order.
        self.commands: tuple[Command, ...] = (
            Subscribe(validate_feed, sync_feed, deliver_chat),
            Help(),
            Unsubscribe(),
            ListSubscriptions(),
            Start(),
            SetTimezone(),
            GetTimezone(),
            SetFilter(),
            GetFilter(),
            RemoveFilter(),
            SetTemplate(render_example),
            GetTemplate(),
            RemoveTemplate(),
            SetGlobalTemplate(render_example),
            RemoveGlobalTemplate(),
            GetGlobalTemplate(),
            SetGlobalFilter(),
            GetGlobalFilter(),
            RemoveGlobalFilter(),
            Info(),
            SetContentFields(),
        )

    def command_for(self, text: str) -> Command:
        """The command that handles a message with this text."""
        if not text.startswith("/"):
            return self.unknown_command
        return next(
            (command for command in self.commands if text.startswith(command.command)),
            self.unknown_command,
        )

    def process_update(self, update: Update) -> None:
        message = update.content
        if message is None:
            return

        owner_id = config.owner_telegram_id()
        if owner_id is not None and message.from_id != owner_id:
            return

        if message.text is None:
            return

        self.command_for(message.text).execute(self.store, self.api, message)

    def run(self, executor: Executor | None = None, interval: float = 1.0) -> None:
        """Poll for updates forever, processing each one on the executor."""
        owned = executor is None
        if executor is None:
            executor = ThreadPoolExecutor(max_workers=config.commands_db_pool_number())

        log.info("Starting the El Monitorro bot")
        try:
            while True:
                while (update := self.api.next_update()) is not None:
                    executor.submit(self.process_update, update)
                time.sleep(interval)
        finally:
            if owned:
                executor.shutdown(wait=False)