"""Integration tests for the tax calculation REST endpoint."""

from __future__ import annotations

import json
from http import HTTPStatus
from pathlib import Path
from typing import Dict, Iterable

import pytest
from flask.testing import FlaskClient

DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "regression_scenarios.json"


def _load_scenarios() -> Iterable[Dict[str, object]]:
    with DATA_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


@pytest.mark.parametrize("scenario", _load_scenarios(), ids=lambda item: item["name"])
def test_calculation_endpoint_matches_regression_scenarios(
    client: FlaskClient, scenario: Dict[str, object]
) -> None:
    """Each regression scenario should remain stable over time."""

    response = client.post("/api/v1/calculations", json=scenario["payload"])
    assert response.status_code == HTTPStatus.OK

    result = response.get_json()
    expected = scenario["expectations"]

    summary = result["summary"]
    for key, value in expected["summary"].items():
        assert summary[key] == value

    bands = {item["name"]: item for item in result["bands"]}
    for name, expectations in expected["bands"].items():
        assert name in bands, f"Missing band {name}"
        for field, value in expectations.items():
            assert bands[name][field] == value


def test_calculation_endpoint_reads_year_from_query(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations?year=2018",
        json={"gross_income": "£43,500"},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["meta"]["tax_year"] == "2018-2019"


def test_calculation_endpoint_returns_bad_request_for_non_json(client: FlaskClient) -> None:
    """Invalid payloads should return a structured 400 response."""

    response = client.post(
        "/api/v1/calculations",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "bad_request"
    assert "JSON" in payload["message"].upper()


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"year": 2018, "gross_income": -1}, "value cannot be negative"),
        ({"year": 2018, "gross_income": "1.5"}, "Invalid decimal"),
        ({"year": 1999, "gross_income": 1000}, "No tax bands defined for year: 1999"),
    ],
)
def test_calculation_endpoint_returns_validation_errors(
    client: FlaskClient, payload: dict, message: str
) -> None:
    """Domain validation errors should surface as 400 responses."""

    response = client.post("/api/v1/calculations", json=payload)

    assert response.status_code == HTTPStatus.BAD_REQUEST
    body = response.get_json()
    assert body["error"] == "validation_error"
    assert message in body["message"]
