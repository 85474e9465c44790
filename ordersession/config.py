"""
Environment-driven configuration for order sessions.

Paths and settings default to the files under config/ and can be overridden
with environment variables.
"""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ordersession.core.rules import RuleConfigLoader
from ordersession.observability.logger import get_logger
from ordersession.session.navigation import APPLICATION_SUMMARY_ROUTE, DEFAULT_URL_TEMPLATE, NavigationPlanner, template_url_builder
from ordersession.session.phrases import PhraseBook
from ordersession.session.settings import ServiceCatalog

logger = get_logger(__name__)

CONFIG_DIR = Path("config")


class SessionConfig(BaseModel):
    """
    Settings shared by every session of a process.

    Attributes:
        rules_path: Validation rules YAML
        services_path: Service catalog YAML
        phrases_path: Introduction phrases YAML
        summary_route: Route navigation falls back to at either end
        url_template: Format string for navigation URLs
        log_level: Logging level
        log_format: "json" or "text"
        metrics_port: Port for the Prometheus metrics server
    """

    rules_path: Path = CONFIG_DIR / "validation_rules.yaml"
    services_path: Path = CONFIG_DIR / "services.yaml"
    phrases_path: Path = CONFIG_DIR / "phrases.yaml"
    summary_route: str = APPLICATION_SUMMARY_ROUTE
    url_template: str = DEFAULT_URL_TEMPLATE
    log_level: str = "INFO"
    log_format: str = "json"
    metrics_port: int = Field(default=8000, ge=1, le=65535)

    @classmethod
    def from_env(cls, **overrides: Any) -> "SessionConfig":
        """Build a config from ORDER_* and logging environment variables."""
        values = {
            "rules_path": os.getenv("ORDER_RULES_PATH", str(CONFIG_DIR / "validation_rules.yaml")),
            "services_path": os.getenv("ORDER_SERVICES_PATH", str(CONFIG_DIR / "services.yaml")),
            "phrases_path": os.getenv("ORDER_PHRASES_PATH", str(CONFIG_DIR / "phrases.yaml")),
            "summary_route": os.getenv("ORDER_SUMMARY_ROUTE", APPLICATION_SUMMARY_ROUTE),
            "url_template": os.getenv("ORDER_URL_TEMPLATE", DEFAULT_URL_TEMPLATE),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "log_format": os.getenv("LOG_FORMAT", "json"),
            "metrics_port": int(os.getenv("METRICS_PORT", "8000")),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def load_rules(self) -> list[dict[str, Any]]:
        """Rules from rules_path; a missing file yields no rules."""
        if not self.rules_path.exists():
            logger.warning(f"Rule file not found, validating without rules: {self.rules_path}")
            return []
        return RuleConfigLoader(self.rules_path).load_rules()

    def load_catalog(self) -> ServiceCatalog:
        return ServiceCatalog.from_yaml(self.services_path)

    def load_phrases(self) -> PhraseBook:
        return PhraseBook.from_yaml(self.phrases_path)

    def planner(self) -> NavigationPlanner:
        return NavigationPlanner(
            summary_route=self.summary_route,
            url_builder=template_url_builder(self.url_template),
        )
