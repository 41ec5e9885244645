from __future__ import annotations

import logging

from flask import Flask, jsonify

from .core.exceptions import (
    DomainError,
    InvalidCredential,
    StoreUnavailable,
    SyncInProgress,
    SyncTransportError,
    TerminalNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)


def register(app: Flask) -> None:
    """Map domain errors to JSON responses shared by every controller."""

    def _error(message: str, status: int, **extra):
        body = {"success": False, "message": message}
        body.update(extra)
        return jsonify(body), status

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return _error(str(e), 400)

    @app.errorhandler(TerminalNotFound)
    def handle_not_found(e: TerminalNotFound):
        return _error(str(e), 404)

    @app.errorhandler(SyncInProgress)
    def handle_in_progress(e: SyncInProgress):
        return _error(str(e), 409)

    @app.errorhandler(InvalidCredential)
    def handle_invalid_credential(e: InvalidCredential):
        # The client drops its stored key and asks the user to log in again.
        return _error(str(e), 401, reauth=True)

    @app.errorhandler(SyncTransportError)
    def handle_transport(e: SyncTransportError):
        return _error(str(e), 502, upstream_status=e.status_code)

    @app.errorhandler(StoreUnavailable)
    def handle_store(e: StoreUnavailable):
        logger.error("Store unavailable: %s", e)
        return _error(str(e), 503)

    @app.errorhandler(DomainError)
    def handle_domain(e: DomainError):
        return _error(str(e), 400)
