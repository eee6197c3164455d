"""A small client for the Telegram Bot API."""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any

import requests

from elmonitorro import config
from elmonitorro.telegram_types import Update

BASE_API_URL = "https://api.telegram.org/bot"
ALLOWED_UPDATES = ("message", "channel_post")

log = logging.getLogger(__name__)


class TelegramError(Exception):
    """Base class of errors returned by the Telegram client."""


class HttpError(TelegramError):
    """The request failed or the response could not be understood."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class ApiError(TelegramError):
    """Telegram answered with an error response."""

    def __init__(
        self, error_code: int, description: str, parameters: Any | None = None
    ) -> None:
        super().__init__(f"{error_code}: {description}")
        self.error_code = error_code
        self.description = description
        self.parameters = parameters


class Api:
    """Sends requests to the Bot API and buffers incoming updates."""

    def __init__(
        self, token: str | None = None, session: requests.Session | None = None
    ) -> None:
        if token is None:
            token = config.telegram_bot_token()
        self.api_url = f"{BASE_API_URL}{token}"
        self.session = session if session is not None else requests.Session()
        self.offset: int | None = None
        self.buffer: deque[Update] = deque()

    def request(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Call a method and return the `result` field of the response."""
        url = f"{self.api_url}/{method}"
        headers = {"Content-Type": "application/json"}
        data = None if params is None else json.dumps(params)
        try:
            response = self.session.post(url, data=data, headers=headers)
            body = response.content
        except requests.RequestException as err:
            raise HttpError(500, repr(err)) from err

        try:
            payload = json.loads(body)
        except ValueError as err:
            text = body.decode("utf-8", errors="replace")
            raise HttpError(500, f"{err!r} {text!r}") from err

        if isinstance(payload, dict):
            if payload.get("ok") is True and "result" in payload:
                return payload["result"]
            if payload.get("ok") is False and "error_code" in payload:
                raise ApiError(
                    payload["error_code"],
                    payload.get("description", ""),
                    payload.get("parameters"),
                )
        raise HttpError(500, f"unexpected response {body.decode('utf-8', errors='replace')!r}")

    def get_updates(self) -> list[Update]:
        params: dict[str, Any] = {"allowed_updates": list(ALLOWED_UPDATES)}
        if self.offset is not None:
            params["offset"] = self.offset
        result = self.request("getUpdates", params)
        try:
            return [Update.from_dict(item) for item in result]
        except (KeyError, TypeError, ValueError) as err:
            raise HttpError(500, f"malformed updates: {err!r}") from err

    def next_update(self) -> Update | None:
        """Return the next pending update, fetching more when the buffer is empty."""
        if self.buffer:
            return self.buffer.popleft()

        try:
            updates = self.get_updates()
        except TelegramError as err:
            log.error("Failed to fetch updates %r", err)
            return None

        self.buffer.extend(updates)
        if self.buffer:
            self.offset = self.buffer[-1].update_id + 1
            return self.buffer.popleft()
        return None

    def send_message(
        self, chat_id: int, text: str, reply_to_message_id: int | None = None
    ) -> Any:
        params: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if reply_to_message_id is not None:
            params["reply_to_message_id"] = reply_to_message_id
        return self.request("sendMessage", params)

    def send_text_message(self, chat_id: int, text: str) -> None:
        try:
            self.send_message(chat_id, text)
        except TelegramError as err:
            log.error("Failed to send message %r: chat %s", err, chat_id)
            raise