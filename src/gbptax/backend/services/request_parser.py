"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest


def _apply_query_defaults(req: Request, payload: dict[str, Any]) -> None:
    """Fill ``year`` from the query string when the body omits it."""

    if "year" in payload:
        return

    year_param = req.args.get("year")
    if year_param is None:
        return

    try:
        payload["year"] = int(year_param)
    except ValueError as exc:
        raise BadRequest(f"Query parameter 'year' must be an integer: {year_param}") from exc


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract and validate a JSON payload from ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _apply_query_defaults(req, payload)

    return payload
