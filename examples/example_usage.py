"""Example: drive a sync through the service layer (no Flask).

Run from the repository root: python -m examples.example_usage 192.168.1.201
"""

import importlib
import sys

from config import get_settings_module

from src.attendance_sync.attendance_sync.container import build_container
from src.attendance_sync.attendance_sync.core.exceptions import DuplicateAddress
from src.attendance_sync.attendance_sync.reconciliation.model import summary_to_dict


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)
    registry = container.registry_service

    address = sys.argv[1] if len(sys.argv) > 1 else "192.168.1.201"
    try:
        terminal = registry.add_manual(address)
    except DuplicateAddress:
        terminal = next(t for t in registry.list_terminals() if t.network_address == address)
    registry.select([terminal.identity_key])

    report = container.sync_service.fetch_and_reconcile()
    for summary in report.summaries[:10]:
        print(summary_to_dict(summary))
    for error in report.errors:
        print("ERROR", error.address, error.message)


if __name__ == "__main__":
    main()
