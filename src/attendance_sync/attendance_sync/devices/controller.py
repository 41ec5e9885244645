from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_DEVICE_PORT
from ..core.exceptions import ValidationError
from .model import Terminal


def terminal_to_dict(t: Terminal) -> dict:
    data = t.to_dict()
    data["identity_key"] = t.identity_key
    data["designated_port"] = t.designated_port
    data["label"] = t.label
    return data


def register(app: Flask, container: Container) -> None:
    registry = container.registry_service

    def _json_body() -> dict:
        body = request.get_json(silent=True)
        if body is None:
            return {}
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body

    @app.route("/api/devices", methods=["GET"], endpoint="list_devices")
    def list_devices():
        return jsonify({"success": True, "devices": [terminal_to_dict(t) for t in registry.list_terminals()]})

    @app.route("/api/devices", methods=["POST"], endpoint="add_device")
    def add_device():
        body = _json_body()
        terminal = registry.add_manual(str(body.get("address") or ""), body.get("port", DEFAULT_DEVICE_PORT))
        return jsonify({"success": True, "device": terminal_to_dict(terminal)}), 201

    @app.route("/api/devices/<key>", methods=["DELETE"], endpoint="remove_device")
    def remove_device(key: str):
        purge = request.args.get("purge_history", "0") in {"1", "true", "yes"}
        terminal = registry.remove(key, purge_history=purge)
        return jsonify({"success": True, "device": terminal_to_dict(terminal)})

    @app.route("/api/devices/<key>/name", methods=["PUT"], endpoint="rename_device")
    def rename_device(key: str):
        body = _json_body()
        terminal = registry.rename(key, body.get("custom_name"))
        return jsonify({"success": True, "device": terminal_to_dict(terminal)})

    @app.route("/api/devices/discover", methods=["POST"], endpoint="discover_devices")
    def discover_devices():
        body = _json_body()
        report = registry.refresh_from_discovery(container.scanner, body.get("network"))
        return jsonify(
            {
                "success": True,
                "inserted": [terminal_to_dict(t) for t in report.inserted],
                "updated": [terminal_to_dict(t) for t in report.updated],
                "devices": [terminal_to_dict(t) for t in registry.list_terminals()],
            }
        )

    @app.route("/api/devices/selection", methods=["GET"], endpoint="get_selection")
    def get_selection():
        return jsonify({"success": True, "devices": [terminal_to_dict(t) for t in registry.selected()]})

    @app.route("/api/devices/selection", methods=["PUT"], endpoint="set_selection")
    def set_selection():
        keys = _json_body().get("keys") or []
        if not isinstance(keys, list):
            raise ValidationError("keys must be a list")
        selected = registry.select([str(k) for k in keys])
        return jsonify({"success": True, "devices": [terminal_to_dict(t) for t in selected]})
