"""
API gateway: combines the auth, organizer, building and event blueprints.
This is the local entrypoint for development; each service's own server.py
reuses create_app() with just its blueprint.
"""

import logging
from functools import partial
from typing import Iterable, Optional

from flask import Flask, jsonify
from flask_cors import CORS

from backend.auth_service.directory import OrganizerDirectory
from backend.auth_service.notifier import EmailNotifier
from backend.auth_service.repository import OrganizerRepository
from backend.auth_service.routes import auth_bp
from backend.auth_service.utils import PasswordHasher, TokenIssuer
from backend.building_service.routes import buildings_bp
from backend.config import ServiceConfig, load_config
from backend.database.db_connection import get_db
from backend.events_service.routes import events_bp
from backend.orgmng_service.routes import organizers_bp

# Basic console logging during API requests
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")

SERVICES = {
    "auth": (auth_bp, "/auths"),
    "organizers": (organizers_bp, "/organizers"),
    "buildings": (buildings_bp, "/buildings"),
    "events": (events_bp, "/events"),
}


def init_extensions(app: Flask, config: ServiceConfig) -> None:
    """
    Build the shared collaborators from `config` and attach them to the app.
    Route handlers reach them through `current_app.extensions`.
    """
    hasher = PasswordHasher()
    token_issuer = TokenIssuer(config.jwt_secret, config.token_expiration_minutes)
    notifier = EmailNotifier(config.resend_api_key, config.mail_from)
    db_connect = partial(get_db, config.database_url, config.db_statement_timeout_ms)
    repository = OrganizerRepository(db_connect)

    app.extensions["db_connect"] = db_connect
    app.extensions["password_hasher"] = hasher
    app.extensions["token_issuer"] = token_issuer
    app.extensions["organizer_directory"] = OrganizerDirectory(
        repository=repository,
        hasher=hasher,
        token_issuer=token_issuer,
        notifier=notifier,
        admin_notify_email=config.admin_notify_email,
        base_url=config.base_url,
    )


def create_app(config: Optional[ServiceConfig] = None, services: Optional[Iterable[str]] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        config (ServiceConfig, optional): Defaults to load_config().
        services (iterable of str, optional): Subset of SERVICES to mount;
            all of them when omitted.

    Returns:
        Flask: The configured Flask application.
    """
    config = config or load_config()

    app = Flask(__name__)
    app.config["SERVICE_CONFIG"] = config

    CORS(app, resources={
        r"/*": {
            "origins": [
                "http://localhost:3000",  # Frontend dev server
                "http://localhost:5050",  # Local development gateway
                "null"  # For local file testing
            ],
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "expose_headers": ["Content-Type", "Authorization"],
            "supports_credentials": True
        }
    })

    init_extensions(app, config)

    # --- REGISTER BLUEPRINTS ---
    selected = list(services) if services is not None else list(SERVICES)
    for name in selected:
        blueprint, prefix = SERVICES[name]
        app.register_blueprint(blueprint, url_prefix=prefix)
    logging.info(f"Blueprints registered: {', '.join(selected)}")

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health():
        """
        Health check endpoint.
        """
        return jsonify({"status": "ok"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    port = app.config["SERVICE_CONFIG"].gateway_port
    app.run(host="0.0.0.0", port=port, debug=True)
