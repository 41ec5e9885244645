from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .core.constants import (
    DEFAULT_DEDUP_WINDOW_SECONDS,
    DEFAULT_DEVICE_TIMEOUT_SECONDS,
    DEFAULT_DISCOVERY_TIMEOUT_MS,
    DEFAULT_DISCOVERY_WORKERS,
    DEFAULT_SYNC_TIMEOUT_SECONDS,
)
from .core.enums import StoreBackend
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .devices.discovery import NetworkScanner
from .devices.kv_terminal_repository import KVTerminalRepository
from .devices.service import DeviceRegistryService
from .devices.sources import DiscoverySource, EventSource
from .devices.zk_event_source import ZKEventSource
from .reconciliation.service import DailyReconciler
from .storage.event_history import EventHistoryRepository
from .storage.memory_store import InMemoryKeyValueStore
from .storage.mysql_store import MySQLKeyValueStore
from .storage.repository import KeyValueStore
from .sync.endpoint import SyncEndpoint
from .sync.http_endpoint import HttpSyncEndpoint
from .sync.service import SyncOrchestrator


@dataclass(frozen=True)
class Container:
    store: KeyValueStore

    terminals_repo: KVTerminalRepository
    history_repo: EventHistoryRepository

    scanner: DiscoverySource
    reconciler: DailyReconciler
    registry_service: DeviceRegistryService
    sync_service: SyncOrchestrator


def build_store(settings: Any) -> KeyValueStore:
    backend = str(getattr(settings, "STORE_BACKEND", StoreBackend.MYSQL.value)).lower()
    if backend == StoreBackend.MEMORY.value:
        return InMemoryKeyValueStore()
    if backend == StoreBackend.MYSQL.value:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        return MySQLKeyValueStore(conn)
    raise ValidationError(f"Unknown STORE_BACKEND {backend!r}")


def build_container(
    *,
    settings: Any,
    store: Optional[KeyValueStore] = None,
    source: Optional[EventSource] = None,
    scanner: Optional[DiscoverySource] = None,
    endpoint: Optional[SyncEndpoint] = None,
) -> Container:
    store = store or build_store(settings)

    terminals_repo = KVTerminalRepository(store)
    history_repo = EventHistoryRepository(store)

    source = source or ZKEventSource(
        timeout=int(getattr(settings, "DEVICE_TIMEOUT_SECONDS", DEFAULT_DEVICE_TIMEOUT_SECONDS)),
        password=int(getattr(settings, "DEVICE_PASSWORD", 0)),
    )
    scanner = scanner or NetworkScanner(
        max_workers=int(getattr(settings, "DISCOVERY_WORKERS", DEFAULT_DISCOVERY_WORKERS)),
        timeout_ms=int(getattr(settings, "DISCOVERY_TIMEOUT_MS", DEFAULT_DISCOVERY_TIMEOUT_MS)),
    )
    endpoint = endpoint or HttpSyncEndpoint(
        base_url=str(getattr(settings, "SYNC_API_URL", "")),
        timeout=float(getattr(settings, "SYNC_TIMEOUT_SECONDS", DEFAULT_SYNC_TIMEOUT_SECONDS)),
    )

    reconciler = DailyReconciler(window_seconds=int(getattr(settings, "DEDUP_WINDOW_SECONDS", DEFAULT_DEDUP_WINDOW_SECONDS)))
    registry_service = DeviceRegistryService(terminals_repo, history_repo)
    sync_service = SyncOrchestrator(
        registry_service,
        history_repo,
        source,
        reconciler,
        endpoint,
        api_key=str(getattr(settings, "SYNC_API_KEY", "")),
        employee_map=getattr(settings, "EMPLOYEE_MAP", None),
    )

    return Container(
        store=store,
        terminals_repo=terminals_repo,
        history_repo=history_repo,
        scanner=scanner,
        reconciler=reconciler,
        registry_service=registry_service,
        sync_service=sync_service,
    )
