# elmonitorro

The command side of a feed reader that lives in Telegram. Chats subscribe to
feeds, and the bot answers slash commands to manage subscriptions, filters,
message templates and time zones. A cleaner job removes feeds nobody is
subscribed to and trims old feed items.

## Commands the bot understands

- `/start` – description of the bot
- `/help` – list of available commands
- `/subscribe url`, `/unsubscribe url`, `/list_subscriptions`
- `/set_timezone minutes`, `/get_timezone` – offset from UTC in minutes,
  divisible by 30, between -720 and 840
- `/set_template url template`, `/get_template url`, `/remove_template url`
- `/set_global_template template`, `/get_global_template`,
  `/remove_global_template`
- `/set_filter url word1,word2`, `/get_filter url`, `/remove_filter url` –
  at most 7 comma separated words, trimmed and lower-cased
- `/set_global_filter words`, `/get_global_filter`, `/remove_global_filter`
- `/info`, `/set_content_fields url fields` – answered only in the chat whose
  id is `ADMIN_TELEGRAM_ID`; `fields` is a comma separated subset of `link`,
  `title`, `publication_date`, `guid`, `description`, `author`

A command may be written as `/cmd@handle` when `TELEGRAM_BOT_HANDLE` is set.
Text that is not a known command gets an "unknown command" reply in private
chats. In groups and supergroups the bot stays quiet for unknown slash
commands and for replies, and asks to have its admin access removed for other
messages. In channels it never answers unknown input.

## Modules

- `elmonitorro.config` – settings read from environment variables.
- `elmonitorro.telegram_types` – `ChatType`, `Chat`, `Message` and `Update`
  built from Bot API JSON with `from_dict`.
- `elmonitorro.telegram_client` – `Api`, a small Bot API client over
  `requests`: `request`, `get_updates`, `next_update` (buffers updates and
  advances the offset), `send_message` and `send_text_message`. Failures raise
  `HttpError` or `ApiError`, both `TelegramError`.
- `elmonitorro.storage` – `Storage`, a thread-safe in-memory store of chats,
  feeds, subscriptions and feed items, with `transaction()` as a context
  manager that undoes its changes on an exception.
- `elmonitorro.cleaner` – `CleanJob` and `RemoveOldItemsJob` (keeps the newest
  1000 items of a feed).
- `elmonitorro.bot.*` – one class per command, all subclasses of
  `elmonitorro.bot.command.Command`, and `elmonitorro.bot.handler.Handler`,
  which dispatches messages to them.

## Configuration

Settings are read from the environment by `elmonitorro.config`:

| Variable | Default | Read by |
| --- | --- | --- |
| `TELEGRAM_BOT_TOKEN` | required | `Api()` when no token is passed |
| `TELEGRAM_BOT_HANDLE` | empty | argument parsing of commands |
| `OWNER_TELEGRAM_ID` | unset | if set, `Handler` serves only this sender |
| `ADMIN_TELEGRAM_ID` | unset | `/info` and `/set_content_fields` |
| `SUBSCRIPTION_LIMIT` | 20 | `/subscribe`, subscriptions per chat |
| `DATABASE_POOL_SIZE` | 5 | worker threads when `Handler.run` makes its own executor |

`config` also offers `database_url`, `request_timeout_in_seconds`,
`deliver_workers_number`, `sync_workers_number`, `clean_workers_number`,
`deliver_interval_in_seconds`, `sync_interval_in_seconds`,
`clean_interval_in_seconds` and `all_binaries` for an application to use;
nothing in this package reads them. A required variable that is missing, or
a variable that cannot be parsed as the expected integer, raises
`ConfigError`.

## Using it from Python

```python
from concurrent.futures import ThreadPoolExecutor

from elmonitorro import config
from elmonitorro.bot.handler import Handler
from elmonitorro.storage import Storage
from elmonitorro.telegram_client import Api

api = Api(config.telegram_bot_token(), None)
store = Storage()
handler = Handler(api, store, render_example, validate_feed, sync_feed, deliver_chat)

with ThreadPoolExecutor(config.commands_db_pool_number()) as executor:
    handler.run(executor, 1)
```

The four callables come from the application:

- `render_example(template)` returns a preview of a template, raising if it
  is invalid;
- `validate_feed(url)` returns the feed type of a URL, raising if it is not a
  feed;
- `sync_feed(store, feed_id)` synchronises a feed, raising on failure;
- `deliver_chat(store, chat_id)` delivers pending items to a chat.

`Handler.run` polls forever. A single update can be handled with
`Handler.process_update`, and `Handler.command_for(text)` tells which command
a message text maps to.

The cleaner is run with `CleanJob().execute(store, queue)`; it deletes feeds
without subscriptions, puts a `RemoveOldItemsJob` on `queue` (any object with
`put`) for every remaining feed and returns how many it enqueued.

## What this package does not do

- It does not fetch, parse or synchronise feeds, render templates or deliver
  feed items to chats; those are the callables passed to `Handler`.
- `Storage` keeps everything in memory; nothing is persisted, and
  `DATABASE_URL` is not used to connect to anything.
- It has no command-line program and no job scheduler: the bot, the cleaner
  and their queues are started from the application's own code.