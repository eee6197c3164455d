"""Jobs that remove stale feeds and trim old feed items."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from elmonitorro.storage import Storage, StorageError

JOB_TYPE = "clean"
FEEDS_PER_PAGE = 500
MESSAGES_LIMIT_PER_FEED = 1000

log = logging.getLogger(__name__)


class _JobQueue(Protocol):
    def put(self, item: object) -> None: ...


@dataclass(frozen=True)
class RemoveOldItemsJob:
    """Keeps only the newest items of one feed."""

    feed_id: int

    def run(self, store: Storage) -> int:
        """Delete old items; return how many were removed, 0 on failure."""
        try:
            return store.delete_old_feed_items(self.feed_id, MESSAGES_LIMIT_PER_FEED)
        except StorageError as error:
            log.error("Failed to delete old feed items for %s: %r", self.feed_id, error)
            return 0

    def task_type(self) -> str:
        return JOB_TYPE


@dataclass(frozen=True)
class CleanJob:
    """Removes unsubscribed feeds and enqueues trimming for every remaining feed."""

    def execute(self, store: Storage, queue: _JobQueue) -> int:
        """Run the job; return the number of feeds enqueued."""
        self._delete_feeds_without_subscriptions(store)

        total = 0
        page = 1
        while True:
            feed_ids = store.load_feed_ids(page, FEEDS_PER_PAGE)
            page += 1
            if not feed_ids:
                break
            total += len(feed_ids)
            for feed_id in feed_ids:
                queue.put(RemoveOldItemsJob(feed_id))

        log.info(
            "Finished enqueuing feeds for deletion of old feed items. Total Number: %s",
            total,
        )
        return total

    def task_type(self) -> str:
        return JOB_TYPE

    @staticmethod
    def _delete_feeds_without_subscriptions(store: Storage) -> None:
        log.info("Started removing feeds without subscriptions")
        try:
            count = store.delete_feeds_without_subscriptions()
        except StorageError as error:
            log.error("Failed to remove feeds without subscriptions %r", error)
        else:
            log.info("Removed %s feeds without subscriptions", count)