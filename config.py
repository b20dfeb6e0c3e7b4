"""
Central configuration for the purchase order service.

Settings priority (highest wins):
  1. Environment variables
  2. config/service_settings.json  (admin-editable, optional)
  3. Hardcoded defaults in this file
"""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# Project root (directory containing this file)
PROJECT_ROOT = Path(__file__).parent

DEFAULT_DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DB_PATH  = DEFAULT_DATA_DIR / "db.json"
DEFAULT_PORT     = 5000


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() not in ("false", "0", "no")


@dataclass
class Config:
    # --- Storage ---
    db_path: Path = field(
        default_factory=lambda: Path(os.getenv("DB_PATH", str(DEFAULT_DB_PATH)))
    )
    pretty_json: bool = field(
        default_factory=lambda: _env_bool("PRETTY_JSON", "true")
    )
    # pretty_json=True  → 2-space indented document (human-editable)
    # pretty_json=False → compact single-line document

    # --- HTTP server ---
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", str(DEFAULT_PORT))))

    def __post_init__(self) -> None:
        """Overlay settings from service_settings.json for keys not set in the environment."""
        config_dir = Path(os.getenv("CONFIG_DIR", str(PROJECT_ROOT / "config")))
        settings_file = config_dir / "service_settings.json"
        if not settings_file.exists():
            return
        # setting name → (env var that takes precedence, type)
        _type_map: dict[str, tuple[str, type]] = {
            "db_path":     ("DB_PATH", Path),
            "pretty_json": ("PRETTY_JSON", bool),
            "host":        ("HOST", str),
            "port":        ("PORT", int),
        }
        try:
            with open(settings_file, encoding="utf-8") as f:
                overrides = {k: v for k, v in json.load(f).items() if not k.startswith("_")}
            for key, val in overrides.items():
                if key not in _type_map:
                    logger.warning("Unknown setting in %s: %s", settings_file.name, key)
                    continue
                env_name, typ = _type_map[key]
                if env_name in os.environ:
                    continue
                if typ is bool and isinstance(val, str):
                    val = val.lower() not in ("false", "0", "no")
                setattr(self, key, typ(val))
        except Exception as exc:
            logger.warning("Failed to load service_settings.json: %s", exc)
