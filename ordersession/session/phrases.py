"""
Pluralised introduction phrases for collection ranges.

Templates hold a singular and a plural variant separated by "|" and use
str.format placeholders ({min}, {max}). Keys follow
"order.<service>.introduction[.min_max|.min_only|.max_only]"; missing
service-specific keys fall back to a generic template for the family.
"""

from pathlib import Path
from typing import Any

import yaml

from ordersession.observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TEMPLATES = {
    "years": "Please provide at least {min} year of history.|Please provide at least {min} years of history.",
    "min_max": "Please provide between {min} and {max} entry.|Please provide between {min} and {max} entries.",
    "min_only": "Please provide at least {min} entry.|Please provide at least {min} entries.",
    "max_only": "You may provide up to {max} entry.|You may provide up to {max} entries.",
}


class PhraseBook:
    """Looks up templates by key and picks the variant for a count."""

    def __init__(self, templates: dict[str, str] | None = None):
        self.templates = dict(templates or {})

    @classmethod
    def from_yaml(cls, path: str | Path) -> "PhraseBook":
        """
        Load templates from a YAML file with a top-level "phrases" mapping.

        A missing file yields the built-in templates only.
        """
        path = Path(path)
        if not path.exists():
            logger.warning(f"Phrase file not found, using built-in phrases: {path}")
            return cls()

        with open(path) as f:
            config = yaml.safe_load(f) or {}

        phrases = config.get("phrases", {})
        if not isinstance(phrases, dict):
            raise ValueError("'phrases' section must be a mapping of key to template")
        return cls({str(key): str(value) for key, value in phrases.items()})

    @staticmethod
    def key_for(service_key: str, family: str) -> str:
        if family == "years":
            return f"order.{service_key}.introduction"
        return f"order.{service_key}.introduction.{family}"

    def choice(self, key: str, count: int, family: str | None = None, **params: Any) -> str:
        """
        Render the template for key, pluralised on count.

        Args:
            key: Template key
            count: Number the plural choice is based on
            family: Generic template family used when key is unknown
            **params: Placeholder values
        """
        template = self.templates.get(key)
        if template is None:
            template = DEFAULT_TEMPLATES.get(family or "", key)

        variants = template.split("|")
        chosen = variants[0] if count == 1 or len(variants) == 1 else variants[1]
        return chosen.format(count=count, **params)
