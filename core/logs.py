import logging
from typing import Any, Dict

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(cfg: Dict[str, Any]) -> None:
    """Apply the [logging] table of config.toml. Safe to call on every rerun."""
    log_cfg = cfg.get("logging", {})
    level = str(log_cfg.get("level", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=log_cfg.get("format", DEFAULT_FORMAT))
    logging.getLogger().setLevel(getattr(logging, level, logging.INFO))
