import logging
import os
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings:
    """Process settings read from the environment."""

    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("GATE_DATA_DIR", "./data"))
        self.rules_path = Path(os.environ.get("GATE_RULES_PATH", str(self.base_dir / "gate.yaml")))
        self.log_level = os.environ.get("GATE_LOG_LEVEL")

    def db_path(self, rules: Rules) -> str:
        """SQLite file for persisted gate state; relative paths live under data_dir."""
        path = Path(rules.storage.db_path)
        if not path.is_absolute():
            path = self.data_dir / path
        return str(path)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def validate_gate_rules(rules: Rules, settings: Settings) -> list[str]:
    """
    Validate operational requirements before startup.
    Returns warnings; a placeholder endpoint is legal (routes to Native).
    """
    warnings: list[str] = []

    if rules.gate.endpoint_is_placeholder:
        warnings.append("Config endpoint is a placeholder; every launch routes to native")
    else:
        logger.info("Config endpoint: %s", rules.gate.config_endpoint)

    if rules.gate.min_loading_seconds > rules.gate.request_timeout_seconds:
        warnings.append("min_loading_seconds exceeds request_timeout_seconds")

    if not settings.data_dir.exists():
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created data dir %s", settings.data_dir)

    for warning in warnings:
        logger.warning(warning)
    return warnings
