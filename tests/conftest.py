"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from gbptax.backend.app import create_app  # noqa: E402
from gbptax.backend.services.calculators import Schedule  # noqa: E402


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def schedule_2018() -> Schedule:
    """The 2018-2019 Scottish schedule used in the worked example."""

    return Schedule.from_thresholds(
        11850,
        ("Top rate", 0.46),
        [
            ("Starter", 2000, 0.19),
            ("Basic", 12150, 0.20),
            ("Intermediate", 31580, 0.21),
            ("Higher", 150000, 0.40),
        ],
    )
