"""Commands that set templates and the timezone."""

from __future__ import annotations

import re
from typing import Callable

from elmonitorro.bot.command import Command, CommandError
from elmonitorro.storage import Storage, StorageError
from elmonitorro.telegram_types import Message

RenderExample = Callable[[str], str]

_INTEGER = re.compile(r"[+-]?[0-9]+")
_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1
MIN_OFFSET = -720
MAX_OFFSET = 840


class SetTemplate(Command):
    """Sets a subscription's template; `render_example` raises on an invalid one."""

    command = "/set_template"

    def __init__(self, render_example: RenderExample) -> None:
        self.render_example = render_example

    def _set_template(self, store: Storage, message: Message, params: str) -> str:
        parts = params.split(" ", 1)
        if len(parts) != 2:
            return "Wrong number of parameters"
        feed_url, template = parts
        if not template:
            return "Template can not be empty"
        try:
            subscription = self.find_subscription(store, message.chat.id, feed_url)
        except CommandError as err:
            return str(err)
        try:
            example = self.render_example(template)
        except Exception:
            return "The template is invalid"
        try:
            store.set_template(subscription, template)
        except StorageError:
            return "Failed to update the template"
        return f"The template was updated. Your messages will look like:\n\n{example}"

    def response(self, store: Storage, message: Message) -> str:
        return self._set_template(store, message, self._argument(message))


class SetGlobalTemplate(Command):
    """Sets a chat's global template; `render_example` raises on an invalid one."""

    command = "/set_global_template"

    def __init__(self, render_example: RenderExample) -> None:
        self.render_example = render_example

    def response(self, store: Storage, message: Message) -> str:
        template = self._argument(message)
        if not template:
            return "Template can not be empty"
        chat = store.find_chat(message.chat.id)
        if chat is None:
            return "You don't have any subcriptions"
        try:
            example = self.render_example(template)
        except Exception:
            return "The template is invalid"
        try:
            store.set_global_template(chat, template)
        except StorageError:
            return "Failed to update the template"
        return (
            "The global template was updated. Your messages will look like:\n\n"
            f"{example}"
        )


class SetTimezone(Command):
    command = "/set_timezone"

    def validate_offset(self, offset_string: str) -> int:
        """Parse a UTC offset in minutes, raising CommandError when it is invalid."""
        if not _INTEGER.fullmatch(offset_string):
            raise CommandError("The value is not a number")
        offset = int(offset_string)
        if not _I32_MIN <= offset <= _I32_MAX:
            raise CommandError("The value is not a number")
        if offset % 30 != 0:
            raise CommandError("Offset must be divisible by 30")
        if not MIN_OFFSET <= offset <= MAX_OFFSET:
            raise CommandError("Offset must be >= -720 (UTC -12) and <= 840 (UTC +14)")
        return offset

    def _update_timezone(self, store: Storage, message: Message, data: str) -> None:
        offset = self.validate_offset(data)
        chat = store.find_chat(message.chat.id)
        if chat is None:
            raise CommandError(
                "You'll be able to set your timezone only after you'll have "
                "at least one subscription"
            )
        try:
            store.set_utc_offset_minutes(chat, offset)
        except StorageError as err:
            raise CommandError("Failed to set your timezone") from err

    def response(self, store: Storage, message: Message) -> str:
        try:
            self._update_timezone(store, message, self._argument(message))
        except CommandError as err:
            return str(err)
        return "Your timezone was updated"