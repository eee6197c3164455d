"""Commands that show stored settings."""

from __future__ import annotations

from elmonitorro.bot.command import Command, CommandError
from elmonitorro.storage import Storage
from elmonitorro.telegram_types import Message


class GetFilter(Command):
    command = "/get_filter"

    def response(self, store: Storage, message: Message) -> str:
        try:
            subscription = self.find_subscription(
                store, message.chat.id, self._argument(message)
            )
        except CommandError as err:
            return str(err)
        if subscription.filter_words is None:
            return "You did not set a filter for this subcription"
        return ", ".join(subscription.filter_words)


class GetGlobalFilter(Command):
    command = "/get_global_filter"

    def response(self, store: Storage, message: Message) -> str:
        chat = store.find_chat(message.chat.id)
        if chat is None or chat.filter_words is None:
            return "You don't have the global filter set"
        return f"Your global filter is \n {', '.join(chat.filter_words)}"


class GetGlobalTemplate(Command):
    command = "/get_global_template"

    def response(self, store: Storage, message: Message) -> str:
        chat = store.find_chat(message.chat.id)
        if chat is None or chat.template is None:
            return "You don't have the global template set"
        return f"Your global template is \n {chat.template}"


class GetTemplate(Command):
    command = "/get_template"

    def response(self, store: Storage, message: Message) -> str:
        try:
            subscription = self.find_subscription(
                store, message.chat.id, self._argument(message)
            )
        except CommandError as err:
            return str(err)
        if subscription.template is None:
            return "You did not set a template for this subcription"
        return subscription.template


class GetTimezone(Command):
    command = "/get_timezone"

    def response(self, store: Storage, message: Message) -> str:
        chat = store.find_chat(message.chat.id)
        if chat is None or chat.utc_offset_minutes is None:
            return "You don't have timezone set"
        return f"Your timezone offset is {chat.utc_offset_minutes} minutes"