"""WSGI entrypoint for serving the gbptax API behind Passenger or gunicorn."""

from gbptax.backend.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
