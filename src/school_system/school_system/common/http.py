from __future__ import annotations

from flask import request


def json_body() -> dict:
    """Request JSON object, or an empty dict for missing/non-object bodies."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
