"""Application factory for gbptax backend services."""

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest

from .http import problem_response

_LOGGER = logging.getLogger(__name__)


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    # Routes import the calculation service, which in turn imports the request
    # models from this package.
    from .routes import register_routes
    from .routes.config import get_configuration_metadata

    app = Flask(__name__)
    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Gracefully surface domain validation errors to clients."""

        _LOGGER.info("Rejected calculation request: %s", error)
        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()

    return app
