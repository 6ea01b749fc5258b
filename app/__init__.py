# /app/__init__.py
import os
import logging
from flask import Flask
from dotenv import load_dotenv
from config import ProductionConfig
from garden.config_service import ConfigManager
from app.routes import garden_api_bp


load_dotenv()


def init_sentry():
    """Initialize Sentry error tracking if SENTRY_DSN is configured."""
    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        return

    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        environment = os.getenv("FLASK_ENV") or os.getenv("ENV") or "development"

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            integrations=[
                FlaskIntegration(),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR
                ),
            ],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
            attach_stacktrace=True,
            debug=os.getenv("SENTRY_DEBUG", "0") == "1",
        )
        logging.info(f"Sentry initialized for environment: {environment}")
    except Exception as e:
        logging.error(f"Failed to initialize Sentry: {e}")


def create_app(config_name: str = ""):
    init_sentry()

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(ProductionConfig)

    if config_name:
        app.config.from_object(f"config.{config_name}Config")

    # Merge JSON config (spreadsheet id, ranges, ranking limit)
    app.config.update(ConfigManager().config)

    # Names come back as-is, not \u-escaped
    app.json.ensure_ascii = False

    logging.basicConfig(
        level=logging.DEBUG if app.config.get("DEBUG") else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # prevent duplicate handlers in some reload scenarios
    )

    # One Sheets client per process, created on first use
    app.extensions["sheets_service"] = None

    app.register_blueprint(garden_api_bp)

    return app
