"""Application factory and app-wide configuration."""

import logging
import os
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from ledger.app.api.routes import api_bp
from ledger.storage import LedgerStore

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def create_app(test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance."""
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_mapping(
        DATABASE=os.path.join(app.instance_path, "ledger.db"),
        CORS_ORIGINS=DEFAULT_CORS_ORIGINS,
        HORIZON_YEARS=10,
        MAX_HORIZON_YEARS=50,
        LOG_LEVEL="INFO",
    )
    # LEDGER_DATABASE, LEDGER_HORIZON_YEARS, ... override the defaults
    app.config.from_prefixed_env("LEDGER")
    if test_config is not None:
        app.config.from_mapping(test_config)

    logging.getLogger("ledger").setLevel(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    store = LedgerStore(app.config["DATABASE"])
    store.init_db()
    app.extensions["ledger_store"] = store

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
