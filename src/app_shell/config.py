import logging
import os
from pathlib import Path

from src.components.publish import PublishEndpoints
from src.rules.models import EditorialRules

logger = logging.getLogger(__name__)

DB_FILENAME = "editorial_gate.db"


def _optional_env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


class Settings:
    """Process settings read from EDITORIAL_GATE_* environment variables."""

    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("EDITORIAL_GATE_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / DB_FILENAME)
        self.rules_path = Path(
            os.environ.get("EDITORIAL_GATE_RULES", str(self.base_dir / "editorial_rules.yaml"))
        )
        self.migrations_dir = str(self.base_dir / "migrations")
        self.webhook_staging = _optional_env("EDITORIAL_GATE_WEBHOOK_STAGING")
        self.webhook_production = (
            _optional_env("EDITORIAL_GATE_WEBHOOK_PRODUCTION") or self.webhook_staging
        )
        self.http_timeout_seconds = self._read_timeout()

    @staticmethod
    def _read_timeout() -> float | None:
        raw = _optional_env("EDITORIAL_GATE_HTTP_TIMEOUT")
        if raw is None:
            return None
        try:
            timeout = float(raw)
        except ValueError as e:
            raise ValueError(f"EDITORIAL_GATE_HTTP_TIMEOUT must be a number, got {raw!r}") from e
        if timeout <= 0:
            raise ValueError("EDITORIAL_GATE_HTTP_TIMEOUT must be positive")
        return timeout

    def endpoints(self) -> PublishEndpoints:
        return PublishEndpoints(staging=self.webhook_staging, production=self.webhook_production)

    def timeout_for(self, rules: EditorialRules) -> float:
        if self.http_timeout_seconds is not None:
            return self.http_timeout_seconds
        return rules.publish.http_timeout_seconds


def validate_startup(settings: Settings, rules: EditorialRules) -> list[str]:
    """
    Check settings that would only fail at publish time.
    Returns the problems found; each is also logged.
    """
    problems: list[str] = []
    if settings.webhook_staging is None:
        problems.append("EDITORIAL_GATE_WEBHOOK_STAGING is not set; publishing will fail")
    if rules.publish.default_environment not in ("staging", "production"):
        problems.append(
            f"Unknown default publish environment: {rules.publish.default_environment}"
        )
    if not rules.authors.approved:
        problems.append("No approved authors configured; every article will be blocked")

    for problem in problems:
        logger.warning(problem)
    return problems
