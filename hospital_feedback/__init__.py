import os
from flask import Flask

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    from dotenv import load_dotenv
    load_dotenv(".env")


from .config import get_config, REQUIRED_IN_PRODUCTION, REQUIRED_DB_IN_PRODUCTION
from .extensions import db, migrate, limiter
from .errors import register_error_handlers
from .security import init_security
from .observability import init_logging, init_sentry
from .services.persistence import DatabaseState, start_background_init


def create_app(overrides=None):
    app = Flask(__name__, static_folder="static", static_url_path="/static")

    # Config: clean, explicit, class-based
    app.config.from_object(get_config())
    app.json.ensure_ascii = False
    if overrides:
        app.config.update(overrides)

    # --- Required env validation for prod-like envs (staging/production) ---
    env_key = (os.getenv("APP_ENV", "development") or "development").lower()
    if env_key in ("staging", "production"):
        missing = [name for name in REQUIRED_IN_PRODUCTION if not os.getenv(name)]
        if not any(os.getenv(name) for name in REQUIRED_DB_IN_PRODUCTION):
            missing.append(" or ".join(REQUIRED_DB_IN_PRODUCTION))
        if missing:
            raise RuntimeError(f"Missing required environment variable(s): {', '.join(missing)}")

    # Pool sizing only applies to server databases; SQLite keeps the driver defaults
    if not app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {
            "pool_size": 10,
            "pool_pre_ping": True,
            "pool_recycle": 280,
        })

    init_logging(app)
    init_sentry(app)

    # Apply HTTPS, HSTS & CSP only in staging/production
    if env_key in ("staging", "production"):
        init_security(app)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db, directory="migrations")
    limiter.init_app(app)
    app.extensions["db_state"] = DatabaseState()

    from . import models  # noqa: F401  (register tables on db.metadata)
    from .blueprints.main import bp as main_bp
    from .blueprints.api import bp as api_bp

    app.register_blueprint(main_bp)   # "/", "/admin"
    app.register_blueprint(api_bp)    # "/api"

    # Exempt Flask's static endpoint from default/global limits
    try:
        limiter.exempt(app.view_functions["static"])
    except KeyError:
        pass

    register_error_handlers(app)

    # CLI commands (ops-grade utilities)
    from .cli import register_cli
    register_cli(app)

    # Schema creation retries in the background; handlers answer 503 until it succeeds
    if app.config.get("DB_INIT_ON_STARTUP", True):
        start_background_init(app)

    return app
