from __future__ import annotations

import importlib
import logging
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import DEFAULT_BALANCE_CEILING, DEFAULT_HOURLY_RATE
from .database.bootstrap import apply_schema
from .ledger.controller import register as register_ledger

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)

    container = build_container(
        db_config=db_config,
        default_hourly_rate=Decimal(str(getattr(settings, "BH_DEFAULT_HOURLY_RATE", DEFAULT_HOURLY_RATE))),
        default_ceiling=Decimal(str(getattr(settings, "BH_DEFAULT_LIMIT", DEFAULT_BALANCE_CEILING))),
    )

    register_ledger(app, container)

    return app
