import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from importlib import import_module

import tomllib

from core.types import HealthModule

logger = logging.getLogger(__name__)

CONFIG_PATH = "config.toml"


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        logger.warning("config file %s not found, using defaults", path)
        return {}
    with open(p, "rb") as f:
        return tomllib.load(f)


def enabled_module_names(cfg: Dict[str, Any]) -> List[str]:
    mod_cfg = cfg.get("modules", {})
    ordered = sorted(((m, v.get("order", 999)) for m, v in mod_cfg.items() if v.get("enabled", True)), key=lambda x: x[1])
    return [name for name, _ in ordered]


def load_enabled_modules(cfg: Optional[Dict[str, Any]] = None) -> List[HealthModule]:
    if cfg is None:
        cfg = load_config()
    mods = []
    for name in enabled_module_names(cfg):
        mod = import_module(f"modules.{name}.{name}")
        # optional hook: modules read their own config section once
        if hasattr(mod, "configure"):
            mod.configure(cfg)
        logger.info("loaded health module %s", name)
        mods.append(mod)
    return mods
