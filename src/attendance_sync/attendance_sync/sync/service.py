from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import InvalidCredential, SyncInProgress, TerminalUnreachable
from ..devices.sources import EventSource
from ..devices.model import Terminal
from ..devices.service import DeviceRegistryService
from ..events.model import RawEvent
from ..reconciliation.model import DailySummary, ReconciliationResult
from ..reconciliation.service import DailyReconciler
from ..storage.event_history import EventHistoryRepository
from .endpoint import SyncEndpoint
from .model import ApiKeyInfo, FetchReport, SyncOutcome, SyncRun, TerminalError, to_payload

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Use case: fetch selected terminals, reconcile, push to the HR endpoint.

    Terminals are read one after another; devices accept very few concurrent
    connections. Only one sync may run at a time.
    """

    def __init__(
        self,
        registry: DeviceRegistryService,
        history: EventHistoryRepository,
        source: EventSource,
        reconciler: DailyReconciler,
        endpoint: SyncEndpoint,
        *,
        api_key: str = "",
        employee_map: Optional[Mapping[int, int]] = None,
    ):
        self._registry = registry
        self._history = history
        self._source = source
        self._reconciler = reconciler
        self._endpoint = endpoint
        self._api_key = api_key
        self._employee_map = dict(employee_map or {})
        self._lock = threading.Lock()

    @contextmanager
    def _exclusive(self):
        if not self._lock.acquire(blocking=False):
            raise SyncInProgress("Another sync is already running")
        try:
            yield
        finally:
            self._lock.release()

    def _resolve(self, identity_keys: Optional[Sequence[str]]) -> list[Terminal]:
        if identity_keys is None:
            candidates = self._registry.selected()
        else:
            candidates = [self._registry.get(k) for k in identity_keys]
        terminals: list[Terminal] = []
        seen: set[str] = set()
        for t in candidates:
            if t.identity_key not in seen:
                seen.add(t.identity_key)
                terminals.append(t)
        return terminals

    def fetch_and_reconcile(
        self,
        identity_keys: Optional[Sequence[str]] = None,
        *,
        cancel: Optional[threading.Event] = None,
        now: datetime | None = None,
    ) -> FetchReport:
        """Read each terminal, store its punches, and reconcile what was read.

        A failing terminal is recorded and skipped. Cancellation is honoured
        between terminals, never in the middle of a fetch.
        """
        now = now or now_local()
        terminals = self._resolve(identity_keys)

        with self._exclusive():
            combined: list[RawEvent] = []
            seen: set[tuple[int, str]] = set()
            errors: list[TerminalError] = []
            fetched: list[str] = []
            skipped: list[str] = []
            cancelled = False

            for i, terminal in enumerate(terminals):
                if cancel is not None and cancel.is_set():
                    cancelled = True
                    skipped = [t.identity_key for t in terminals[i:]]
                    logger.info("Sync cancelled; %d terminal(s) not visited", len(skipped))
                    break

                port = terminal.designated_port
                try:
                    descriptor, events = self._source.fetch_events(terminal.network_address, port)
                except TerminalUnreachable as e:
                    logger.warning("Skipping terminal %s: %s", terminal.label, e)
                    errors.append(TerminalError(identity_key=terminal.identity_key, address=terminal.network_address, message=str(e)))
                    continue

                updated = self._registry.record_fetch(terminal.identity_key, descriptor, synced_at=now)
                self._history.merge(updated.identity_key, events)
                if updated.identity_key in fetched:
                    # Two registry entries resolved to the same device.
                    logger.info("Terminal %s already read in this run", updated.identity_key)
                    continue
                for ev in events:
                    if ev.history_key not in seen:
                        seen.add(ev.history_key)
                        combined.append(ev)
                fetched.append(updated.identity_key)

        result = self._reconciler.reconcile(combined, now=now)
        logger.info(
            "Fetched %d punch(es) from %d terminal(s), %d failed -> %d daily summaries",
            len(combined), len(fetched), len(errors), len(result.summaries),
        )
        return FetchReport(
            summaries=result.summaries,
            events=combined,
            errors=errors,
            warnings=result.warnings,
            fetched=fetched,
            skipped=skipped,
            cancelled=cancelled,
        )

    def summarize_cached(
        self,
        identity_keys: Optional[Sequence[str]] = None,
        *,
        now: datetime | None = None,
    ) -> ReconciliationResult:
        """Reconcile stored history without contacting any terminal."""
        keys = [t.identity_key for t in self._resolve(identity_keys)]
        return self._reconciler.reconcile(self._history.load_many(keys), now=now)

    def _credential(self, api_key: Optional[str]) -> str:
        key = (api_key or self._api_key or "").strip()
        if not key:
            raise InvalidCredential("No API key configured")
        return key

    def push(self, summaries: Sequence[DailySummary], *, api_key: Optional[str] = None) -> SyncOutcome:
        key = self._credential(api_key)
        if not summaries:
            return SyncOutcome()
        records = [to_payload(s, self._employee_map) for s in summaries]
        outcome = self._endpoint.push(key, records)
        if not outcome.success:
            logger.warning(
                "Partial sync: %d skipped, %d failed of %d record(s)",
                outcome.skipped_count, outcome.failed_count, len(records),
            )
        return outcome

    def sync(
        self,
        identity_keys: Optional[Sequence[str]] = None,
        *,
        api_key: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
        now: datetime | None = None,
    ) -> SyncRun:
        key = self._credential(api_key)
        report = self.fetch_and_reconcile(identity_keys, cancel=cancel, now=now)
        outcome = self.push(report.summaries, api_key=key)
        return SyncRun(report=report, outcome=outcome)

    def test_connection(self, *, api_key: Optional[str] = None) -> ApiKeyInfo:
        info = self._endpoint.verify(self._credential(api_key))
        if not info.valid:
            raise InvalidCredential("API key is not valid")
        return info
