"""Best-effort recording of successful searches."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from cityweather.core.models import HistoryStore


logger = logging.getLogger(__name__)


class HistoryRecorder:
    """Write history entries without letting failures reach the caller.

    With ``workers`` > 0 writes run on a thread pool and :meth:`submit`
    returns immediately; with ``workers=0`` they run inline. Either way a
    failed write is logged and dropped.
    """

    def __init__(self, store: HistoryStore, workers: int = 2) -> None:
        self.store = store
        self._executor: Optional[ThreadPoolExecutor] = None
        if workers > 0:
            self._executor = ThreadPoolExecutor(
                max_workers=workers,
                thread_name_prefix="history-writer",
            )

    def submit(self, city: str) -> Optional[Future]:
        if self._executor is None:
            self._record(city)
            return None
        try:
            return self._executor.submit(self._record, city)
        except RuntimeError:
            # executor already shut down
            logger.error("History writer is stopped, dropping search for %r", city)
            return None

    def _record(self, city: str) -> None:
        try:
            self.store.record(city)
        except Exception:
            # a worker thread has no caller to report to
            logger.exception("Failed to record search for %r", city)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)


__all__ = ["HistoryRecorder"]
