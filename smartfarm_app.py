"""Entry point for the SmartFarm monitoring backend.

Builds the app with the monitoring loop running and serves it with the
Flask development server. Production deployments can point a WSGI server
at ``smartfarm_app:build_app()`` instead.
"""
from __future__ import annotations

import logging

from flask import Flask

from app import create_app
from app.config import load_config


def build_app() -> Flask:
    """Create the Flask app with the polling thread started."""
    return create_app(bootstrap_runtime=True)


def main() -> int:
    config = load_config()
    app = build_app()

    logging.info("Starting server on %s:%s", config.host, config.port)
    try:
        app.run(host=config.host, port=config.port, debug=config.DEBUG, use_reloader=False)
        logging.info("Server stopped.")
        return 0
    except KeyboardInterrupt:
        logging.info("Server stopped by user.")
        return 0
    except Exception as exc:  # pragma: no cover - top-level runtime errors
        logging.exception("ERROR: Failed to start server: %s", exc)
        return 1
    finally:
        app.config["CONTAINER"].shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
