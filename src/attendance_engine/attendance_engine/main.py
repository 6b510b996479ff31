from __future__ import annotations

import logging
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv

from config import get_settings_module, load_settings

from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .leave.service import LeaveNotifier

logger = logging.getLogger(__name__)


def configure_logging(settings: ModuleType) -> None:
    level = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=getattr(settings, "LOG_FORMAT", "%(asctime)s [%(levelname)s] %(name)s: %(message)s"),
    )


def bootstrap(*, notifier: Optional[LeaveNotifier] = None) -> Container:
    """Load settings, configure logging, optionally create the schema and wire services."""
    load_dotenv(override=False)

    settings = load_settings()
    configure_logging(settings)

    db_config = dict(getattr(settings, "DB_CONFIG"))
    logger.info("Settings %s, database %s", get_settings_module(), DBConfig.from_mapping(db_config).describe())

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.debug("Schema ready (tables=%d)", len(list_tables(db_config)))

    return build_container(db_config=db_config, notifier=notifier)
