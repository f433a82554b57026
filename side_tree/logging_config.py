from __future__ import annotations

"""Central logging configuration for the side tree.

Import and call :func:`setup_logging` at application start-up. The
``logging`` section of the configuration is a :func:`logging.config.dictConfig`
mapping; its ``file`` handler is redirected to ``$SIDE_TREE_LOG_DIR/app.log``.
"""

import copy
import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, List

from side_tree.config import ConfigManager

__all__ = ["setup_logging"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_REFRESH_LOGGERS = (
    "side_tree.ui.controllers.tree_panel_controller",
    "side_tree.core.services.refresh_scheduler",
)
_TRUTHY = {"1", "true", "yes", "on"}


def setup_logging() -> Path:
    """Configure logging from the YAML configuration and return the log file path."""
    log_file = _log_file()
    section = ConfigManager().get_logging_config()

    if isinstance(section, dict) and section.get("version"):
        config: Dict[str, Any] = copy.deepcopy(section)
        file_handler = config.get("handlers", {}).get("file")
        if file_handler is not None:
            file_handler["filename"] = str(log_file)
        try:
            logging.config.dictConfig(config)
            logging.getLogger("side_tree").info("===== Logging initialised from config files =====")
        except (ValueError, TypeError, AttributeError, ImportError) as exc:
            _setup_minimal_logging(log_file, reason=str(exc))
    else:
        _setup_minimal_logging(log_file, reason="no logging section")

    for name in _debug_targets():
        _force_debug(name)
    return log_file


def _log_file() -> Path:
    log_dir = Path(os.environ.get("SIDE_TREE_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "app.log"


def _setup_minimal_logging(log_file: Path, reason: str) -> None:
    """Console plus plain file logging, used when the configured section is unusable."""
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"simple": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "simple", "level": "INFO"},
            "file": {
                "class": "logging.FileHandler",
                "formatter": "simple",
                "filename": str(log_file),
                "encoding": "utf-8",
            },
        },
        "root": {"level": "INFO", "handlers": ["console", "file"]},
    })
    logging.error("===== Logging initialised with minimal fallback (%s) =====", reason)


def _debug_targets() -> List[str]:
    """Logger names forced to DEBUG by the environment.

    - ``SIDE_TREE_DEBUG_REFRESH=true``: the controller and the refresh scheduler
    - ``SIDE_TREE_DEBUG_MODULES=a,b``: the listed loggers
    """
    targets: List[str] = []
    if os.environ.get("SIDE_TREE_DEBUG_REFRESH", "").strip().lower() in _TRUTHY:
        targets.extend(_REFRESH_LOGGERS)
    extra = os.environ.get("SIDE_TREE_DEBUG_MODULES", "")
    targets.extend(name.strip() for name in extra.split(",") if name.strip())
    return targets


def _force_debug(name: str) -> None:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if not any(h.level <= logging.DEBUG for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.info("Debug override active for logger '%s'", name)
