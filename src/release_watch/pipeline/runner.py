"""Release note check orchestration.

One run walks FETCHING -> PARSING -> DIFFING -> PERSISTING -> NOTIFYING ->
DONE, or ends in FAILED when the feed (or the stored link set) cannot be
read. Every stage is awaited before the next one starts.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

import structlog

from .diff import diff_entries
from ..config.settings import Settings, settings as default_settings
from ..errors import DeliveryError, FetchError, ReleaseWatchError, RunInProgressError, StorageError
from ..ingestion.fetcher import FeedFetcher
from ..ingestion.interfaces import Entry, FeedParserInterface, FetcherInterface
from ..ingestion.parser import RegexFeedParser, build_parser
from ..notification.formatting import format_failure, format_new_entries
from ..notification.interfaces import NotificationResult, NotifierInterface
from ..notification.slack import build_notifier
from ..storage.database import EntryStore
from ..storage.factory import get_entry_store
from ..storage.interfaces import StorageInterface, StoredEntry

logger = structlog.get_logger()


class RunState(Enum):
    """Stages of a single run."""
    FETCHING = "fetching"
    PARSING = "parsing"
    DIFFING = "diffing"
    PERSISTING = "persisting"
    NOTIFYING = "notifying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunResult:
    """What happened during one run."""
    started_at: datetime
    state: RunState = RunState.FETCHING
    parsed_count: int = 0
    new_entries: List[Entry] = field(default_factory=list)
    failed_entries: List[Entry] = field(default_factory=list)
    notification: Optional[NotificationResult] = None
    error: Optional[ReleaseWatchError] = None
    elapsed_seconds: float = 0.0

    @property
    def failed(self) -> bool:
        return self.state == RunState.FAILED

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "started_at": self.started_at.isoformat(),
            "state": self.state.value,
            "parsed_entries": self.parsed_count,
            "new_entries": len(self.new_entries),
            "failed_entries": len(self.failed_entries),
            "notified": bool(self.notification and self.notification.ok),
            "error": str(self.error) if self.error else None,
            "elapsed_seconds": self.elapsed_seconds,
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReleaseNotePipeline:
    """Fetch the feed, store unseen entries and announce them."""

    def __init__(
        self,
        fetcher: FetcherInterface,
        store: StorageInterface,
        notifier: NotifierInterface,
        parser: FeedParserInterface = None,
        feed_url: str = None,
        feed_name: str = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.fetcher = fetcher
        self.store = store
        self.notifier = notifier
        self.parser = parser or RegexFeedParser()
        self.feed_url = feed_url
        self.feed_name = feed_name or default_settings.feed_name
        self.clock = clock
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run(self) -> RunResult:
        """Run the full pipeline once.

        Raises RunInProgressError if another run holds the lock; all other
        outcomes are reported through the returned RunResult.
        """
        if self._lock.locked():
            raise RunInProgressError("A release note check is already running")

        async with self._lock:
            return await self._run()

    async def run_now(self) -> List[Entry]:
        """Manual trigger: return the entries persisted by this run.

        A failed fetch is raised to the caller. A failed summary
        notification is only logged, since the entries are already stored.
        """
        result = await self.run()
        if result.failed:
            raise result.error
        return list(result.new_entries)

    async def run_scheduled(self) -> None:
        """Scheduled trigger: side effects only, never raises pipeline errors."""
        try:
            result = await self.run()
        except RunInProgressError:
            logger.warning("scheduled_run_skipped", reason="run_in_progress")
            return
        if result.failed:
            logger.error("scheduled_run_failed", error=str(result.error))

    async def _run(self) -> RunResult:
        start = self.clock()
        result = RunResult(started_at=start)

        # Fetch
        result.state = RunState.FETCHING
        try:
            text = await self.fetcher.fetch(self.feed_url)
        except FetchError as e:
            return await self._fail(result, e)

        # Parse (never fails; malformed items become partial entries)
        result.state = RunState.PARSING
        entries = list(self.parser.parse(text))
        result.parsed_count = len(entries)

        # Diff against a fresh snapshot of the store
        result.state = RunState.DIFFING
        try:
            stored = self.store.list_all()
        except StorageError as e:
            return await self._fail(result, e)
        new_entries = diff_entries(entries, stored)
        logger.info("entries_diffed", parsed=len(entries), known=len(stored), new=len(new_entries))

        # Persist with one timestamp for the whole run
        result.state = RunState.PERSISTING
        self._persist(new_entries, result)

        # Notify only when something was stored
        result.state = RunState.NOTIFYING
        if result.new_entries:
            await self._notify_new(result)

        result.state = RunState.DONE
        return self._finish(result)

    def _persist(self, new_entries: List[Entry], result: RunResult) -> None:
        last_seen = self.clock().isoformat()
        for entry in new_entries:
            try:
                entry_id = self.store.insert(StoredEntry.from_entry(entry, last_seen))
            except StorageError as e:
                # Still absent from the store, so the next run offers it again.
                logger.error("entry_insert_failed", link=entry.link.value, error=str(e))
                result.failed_entries.append(entry)
                continue
            logger.info("entry_saved", id=entry_id, title=entry.title[:80])
            result.new_entries.append(entry)

    async def _notify_new(self, result: RunResult) -> None:
        message = format_new_entries(result.new_entries, self.feed_name)
        try:
            result.notification = await self.notifier.send(message)
        except DeliveryError as e:
            logger.error("notification_failed", status=e.status, error=str(e))
            result.notification = NotificationResult(ok=False, status=e.status, error=str(e))
            result.error = e

    async def _fail(self, result: RunResult, error: ReleaseWatchError) -> RunResult:
        logger.error("run_failed", stage=result.state.value, error=str(error))
        result.state = RunState.FAILED
        result.error = error
        try:
            result.notification = await self.notifier.send(format_failure(error, self.feed_name))
        except DeliveryError as e:
            # Reporting the failure must not fail the failure path.
            logger.error("failure_notification_failed", status=e.status, error=str(e))
            result.notification = NotificationResult(ok=False, status=e.status, error=str(e))
        return self._finish(result)

    def _finish(self, result: RunResult) -> RunResult:
        result.elapsed_seconds = (self.clock() - result.started_at).total_seconds()
        logger.info("run_completed", **result.to_dict())
        return result


def build_pipeline(config: Settings = None, store: StorageInterface = None) -> ReleaseNotePipeline:
    """Wire the pipeline from one Settings object.

    Without a config the global settings and the cached store are used.
    With one, every value comes from it; a config without a webhook gets a
    NullNotifier even when the global settings name one.
    """
    if config is None:
        config = default_settings
        store = store or get_entry_store()
    else:
        store = store or EntryStore(config.database_url)

    return ReleaseNotePipeline(
        fetcher=FeedFetcher(
            url=config.feed_url,
            timeout_seconds=config.fetch_timeout_seconds,
            user_agent=config.user_agent,
        ),
        store=store,
        notifier=build_notifier(config.slack_webhook_url, config.notify_timeout_seconds),
        parser=build_parser(config.parser),
        feed_url=config.feed_url,
        feed_name=config.feed_name,
    )
