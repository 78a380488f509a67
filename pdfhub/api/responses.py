from typing import Any

from flask import Response, jsonify


def success(data: Any = None, status: int = 200, message: str | None = None) -> tuple[Response, int]:
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return jsonify(body), status


def failure(message: str, status: int, **extra: Any) -> tuple[Response, int]:
    return jsonify({"success": False, "message": message, **extra}), status
