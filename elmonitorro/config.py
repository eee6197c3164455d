"""Settings read from environment variables."""

from __future__ import annotations

import os
import re

_INTEGER = re.compile(r"[+-]?[0-9]+")

_I32 = (-(2**31), 2**31 - 1)
_I64 = (-(2**63), 2**63 - 1)
_U32 = (0, 2**32 - 1)
_U64 = (0, 2**64 - 1)


class ConfigError(Exception):
    """Raised when a setting is missing or cannot be parsed."""


def _parse_int(name: str, raw: str, bounds: tuple[int, int]) -> int:
    low, high = bounds
    if not _INTEGER.fullmatch(raw) or (low == 0 and raw.startswith("-")):
        raise ConfigError(f"{name} can not be parsed")
    value = int(raw)
    if not low <= value <= high:
        raise ConfigError(f"{name} can not be parsed")
    return value


def _read_required(name: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise ConfigError(f"{name} must be set")
    return value


def _read_int_with_default(name: str, default: str, bounds: tuple[int, int]) -> int:
    return _parse_int(name, os.environ.get(name, default), bounds)


def _read_optional_int(name: str, bounds: tuple[int, int]) -> int | None:
    value = os.environ.get(name)
    if value is None:
        return None
    return _parse_int(name, value, bounds)


def database_url() -> str:
    return _read_required("DATABASE_URL")


def telegram_bot_token() -> str:
    return _read_required("TELEGRAM_BOT_TOKEN")


def request_timeout_in_seconds() -> int:
    return _read_int_with_default("REQUEST_TIMEOUT", "5", _U64)


def owner_telegram_id() -> int | None:
    return _read_optional_int("OWNER_TELEGRAM_ID", _I64)


def admin_telegram_id() -> int | None:
    return _read_optional_int("ADMIN_TELEGRAM_ID", _I64)


def telegram_bot_handle() -> str:
    return os.environ.get("TELEGRAM_BOT_HANDLE", "")


def deliver_workers_number() -> int:
    return _read_int_with_default("DELIVER_WORKERS_NUMBER", "1", _U32)


def sync_workers_number() -> int:
    return _read_int_with_default("SYNC_WORKERS_NUMBER", "1", _U32)


def clean_workers_number() -> int:
    return _read_int_with_default("CLEAN_WORKERS_NUMBER", "1", _U32)


def subscription_limit() -> int:
    return _read_int_with_default("SUBSCRIPTION_LIMIT", "20", _I64)


def commands_db_pool_number() -> int:
    return _read_int_with_default("DATABASE_POOL_SIZE", "5", _U32)


def deliver_interval_in_seconds() -> int:
    return _read_int_with_default("DELIVER_INTERVAL_SECONDS", "60", _I32)


def sync_interval_in_seconds() -> int:
    return _read_int_with_default("SYNC_INTERVAL_SECONDS", "60", _I32)


def clean_interval_in_seconds() -> int:
    return _read_int_with_default("CLEAN_INTERVAL_SECONDS", "3600", _I32)


def all_binaries() -> bool:
    return "ALL_BINARIES" in os.environ