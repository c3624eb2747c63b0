from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from dayflow.common.logging_utils import setup_logging
from dayflow.database.bootstrap import apply_schema, list_tables
from dayflow.settings import get_settings_module

logger = logging.getLogger("dayflow.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), json_output=False)
    db_config = dict(settings.DB_CONFIG)

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    tables = list_tables(db_config)
    logger.info(
        "applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
