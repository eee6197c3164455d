"""The parts of the Telegram Bot API objects the bot uses."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class ChatType(enum.Enum):
    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"


@dataclass(frozen=True)
class Chat:
    id: int
    type: ChatType
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    title: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chat:
        return cls(
            id=data["id"],
            type=ChatType(data["type"]),
            username=data.get("username"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            title=data.get("title"),
        )


@dataclass(frozen=True)
class Message:
    message_id: int
    date: int
    chat: Chat
    text: str | None = None
    from_id: int | None = None
    reply_to_message: Message | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        sender = data.get("from")
        reply = data.get("reply_to_message")
        return cls(
            message_id=data["message_id"],
            date=data["date"],
            chat=Chat.from_dict(data["chat"]),
            text=data.get("text"),
            from_id=sender["id"] if sender is not None else None,
            reply_to_message=cls.from_dict(reply) if reply is not None else None,
        )


@dataclass(frozen=True)
class Update:
    update_id: int
    message: Message | None = None
    channel_post: Message | None = None

    @property
    def content(self) -> Message | None:
        """The message or channel post carried by the update, if any."""
        if self.message is not None:
            return self.message
        return self.channel_post

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Update:
        message = data.get("message")
        channel_post = data.get("channel_post")
        return cls(
            update_id=data["update_id"],
            message=Message.from_dict(message) if message is not None else None,
            channel_post=(
                Message.from_dict(channel_post) if channel_post is not None else None
            ),
        )