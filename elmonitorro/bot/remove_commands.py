"""Commands that remove stored filters and templates."""

from __future__ import annotations

from elmonitorro.bot.command import Command, CommandError
from elmonitorro.storage import Storage, StorageError
from elmonitorro.telegram_types import Message

NO_SUBSCRIPTIONS = "You don't have any subcriptions"


class RemoveFilter(Command):
    command = "/remove_filter"

    def remove_filter(self, store: Storage, message: Message, feed_url: str) -> str:
        try:
            subscription = self.find_subscription(store, message.chat.id, feed_url)
        except CommandError as err:
            return str(err)
        try:
            store.set_filter(subscription, None)
        except StorageError:
            return "Failed to update the filter"
        return "The filter was removed"

    def response(self, store: Storage, message: Message) -> str:
        return self.remove_filter(store, message, self._argument(message))


class RemoveGlobalFilter(Command):
    command = "/remove_global_filter"

    def response(self, store: Storage, message: Message) -> str:
        chat = store.find_chat(message.chat.id)
        if chat is None:
            return NO_SUBSCRIPTIONS
        try:
            store.set_global_filter(chat, None)
        except StorageError:
            return "Failed to update the filter"
        return "The global filter was removed"


class RemoveGlobalTemplate(Command):
    command = "/remove_global_template"

    def response(self, store: Storage, message: Message) -> str:
        chat = store.find_chat(message.chat.id)
        if chat is None:
            return NO_SUBSCRIPTIONS
        try:
            store.set_global_template(chat, None)
        except StorageError:
            return "Failed to update the template"
        return "The global template was removed"


class RemoveTemplate(Command):
    command = "/remove_template"

    def response(self, store: Storage, message: Message) -> str:
        try:
            subscription = self.find_subscription(
                store, message.chat.id, self._argument(message)
            )
        except CommandError as err:
            return str(err)
        try:
            store.set_template(subscription, None)
        except StorageError:
            return "Failed to update the template"
        return "The template was removed"