from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError
from ..reconciliation.model import summary_to_dict
from .model import FetchReport

API_KEY_HEADER = "X-Api-Key"


def report_to_dict(report: FetchReport) -> dict:
    return {
        "summaries": [summary_to_dict(s) for s in report.summaries],
        "event_count": len(report.events),
        "errors": [asdict(e) for e in report.errors],
        "warnings": list(report.warnings),
        "fetched": list(report.fetched),
        "skipped": list(report.skipped),
        "cancelled": report.cancelled,
        "partial": report.partial,
    }


def register(app: Flask, container: Container) -> None:
    sync = container.sync_service

    def _keys() -> Optional[list[str]]:
        body = request.get_json(silent=True) or {}
        keys = body.get("keys") if isinstance(body, dict) else None
        if keys is None:
            raw = request.args.get("keys")
            keys = [k for k in raw.split(",") if k] if raw else None
        if keys is not None and not isinstance(keys, list):
            raise ValidationError("keys must be a list")
        return [str(k) for k in keys] if keys is not None else None

    def _api_key() -> Optional[str]:
        return request.headers.get(API_KEY_HEADER) or None

    @app.route("/api/sync/fetch", methods=["POST"], endpoint="sync_fetch")
    def sync_fetch():
        report = sync.fetch_and_reconcile(_keys())
        return jsonify({"success": not report.partial, **report_to_dict(report)})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    def attendance_summary():
        result = sync.summarize_cached(_keys())
        return jsonify(
            {
                "success": True,
                "summaries": [summary_to_dict(s) for s in result.summaries],
                "warnings": list(result.warnings),
            }
        )

    @app.route("/api/sync/push", methods=["POST"], endpoint="sync_push")
    def sync_push():
        run = sync.sync(_keys(), api_key=_api_key())
        return jsonify(
            {
                "success": run.outcome.success and not run.report.partial,
                "outcome": run.outcome.to_dict(),
                **report_to_dict(run.report),
            }
        )

    @app.route("/api/sync/test-connection", methods=["POST"], endpoint="sync_test_connection")
    def sync_test_connection():
        info = sync.test_connection(api_key=_api_key())
        return jsonify(
            {
                "success": True,
                "message": f"Connection successful! App: {info.app_name or 'Unknown'}",
                "app": asdict(info),
            }
        )
