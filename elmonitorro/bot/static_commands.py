"""Commands whose answers do not depend on stored data."""

from __future__ import annotations

import logging
from typing import Any

from elmonitorro.bot.command import Command
from elmonitorro.storage import Storage
from elmonitorro.telegram_types import ChatType, Message

log = logging.getLogger(__name__)

HELP = (
    "/start - show the description of the bot and its contact information\n\n"
    "/subscribe url - subscribe to the feed\n\n"
    "/unsubscribe url - unsubscribe from the feed\n\n"
    "/list_subscriptions - list your subscriptions\n\n"
    "/help - show available commands\n\n"
    "/set_timezone - set your timezone. All received dates will be converted to this "
    "timezone. It should be offset in minutes from UTC. For example, if you live in "
    "UTC +10 timezone, your offset is equal to 60 x 10 = 600\n\n"
    "/get_timezone - get your timezone\n\n"
    "/set_template url template - set a template for all received feed items for the "
    "specified subscription. All new updates will be converted to the format defined by "
    "this subscription. Supported fields you can use for templates:\n"
    "- bot_feed_name - name of the feed\n"
    "- bot_feed_link - url of the feed\n"
    "- bot_item_name - name of the item\n"
    "- bot_item_link - url of the item\n"
    "- bot_item_description - description of the item\n"
    "- bot_date - publication date of the feed\n"
    "Example: /set_template https://example.com/feed.xml {{bot_feed_name}}\n\n\n"
    "{{bot_item_name}}\n\n\n{{bot_date}}\n\n\n{{bot_item_link}}\n\n"
    "Also, there is the `substring` helper that can be used to limit the number of "
    "characters. For example, {{substring bot_item_description 100}}\n\n"
    "/get_template url - get the template for the subscription\n\n"
    "/remove_template url - remove the template\n\n"
    "/set_global_template template - set global template. This template will be used "
    "for all subscriptions. If the subscription has its own template, it will be used "
    "instead. See /set_template for available fields.\n\n"
    "/remove_global_template - remove global template\n\n"
    "/get_global_template - get global template\n\n"
    "/get_filter url - get the filter for the subscription\n\n"
    "/set_filter url template - set filter, for example, /set_filter "
    "https://example.com/feed.xml telegram,bots. You'll start receiving posts only "
    "containing words in the filter. Use `!word` to stop receiving messages containing "
    "the specified `word`. You can combine regular filter words with ! filter words. "
    "For example, `!bot,telegram`\n\n"
    "/remove_filter url - remove filter\n\n"
    "/set_global_filter filter - set global filter\n\n"
    "/get_global_filter - get a global filter\n\n"
    "/remove_global_filter - remove global filter\n\n"
)

START = (
    "El Monitorro is feed reader as a Telegram bot.\n"
    "It supports RSS, Atom and JSON feeds.\n\n"
    "Use /help to see available commands.\n\n"
    "Synchronization information.\n"
    "When you subscribe to a new feed, you'll receive 10 last messages from it. "
    "After that, you'll start receiving only new feed items.\n"
    "Feed updates check interval is 1 minute. Unread items delivery interval is also "
    "1 minute.\n"
    "Currently, the number of subscriptions is limited to 20.\n\n"
    "Feedback, suggestions and bug reports are welcome. The bot is open source and "
    "free of charge."
)

UNKNOWN_COMMAND_GROUP = (
    "Remove admin access from the bot in this group otherwise it will be replying "
    "to every message."
)
UNKNOWN_COMMAND_PRIVATE = "Unknown command. Use /help to show available commands"


class Help(Command):
    command = "/help"

    def response(self, store: Storage, message: Message) -> str:
        return HELP


class Start(Command):
    command = "/start"

    def response(self, store: Storage, message: Message) -> str:
        return START


class UnknownCommand(Command):
    command = ""

    def response(self, store: Storage, message: Message) -> str:
        chat_type = message.chat.type
        if chat_type is ChatType.PRIVATE:
            return UNKNOWN_COMMAND_PRIVATE
        if chat_type in (ChatType.GROUP, ChatType.SUPERGROUP):
            text = message.text or ""
            if text.startswith("/") or message.reply_to_message is not None:
                return ""
            return UNKNOWN_COMMAND_GROUP
        return ""

    def execute(self, store: Storage, api: Any, message: Message) -> None:
        if message.chat.type is not ChatType.CHANNEL:
            log.info("%s wrote: %s", message.chat.id, message.text)
        text = self.response(store, message)
        if text:
            self.reply_to_message(api, message, text)