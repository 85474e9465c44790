"""
Rule configuration management.

Loads validation rules from YAML files and provides utilities
for building rule configurations in code.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ordersession.core.validators import SEVERITIES


class RuleConfigLoader:
    """
    Loads validation rules from YAML configuration files.

    Rules are grouped by resource (order section) and then by field.

    Expected YAML format:
    ```yaml
    rules:
      education:
        school_name:
          - type: required_field
          - type: length
            params:
              max: 100
        end_date:
          - type: required_field
            params:
              unless: current
          - type: date_after
            params:
              field: start_date
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Load and parse validation rules from YAML file.

        Returns:
            List of rule dictionaries suitable for RuleEngine

        Raises:
            ValueError: If YAML is invalid or missing required fields
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or "rules" not in config:
            raise ValueError("Configuration file must contain 'rules' section")

        resources = config["rules"]
        if not isinstance(resources, Mapping):
            raise ValueError("'rules' section must map resources to field rules")

        rules = []
        for resource, field_rules in resources.items():
            rules.extend(self.parse_field_rules(resource, field_rules))
        return rules

    @classmethod
    def parse_field_rules(cls, resource: str, field_rules: Mapping[str, Any]) -> list[dict[str, Any]]:
        """
        Parse the field -> rule definitions mapping of one resource.

        Also used for rules supplied through requirement constraints.

        Raises:
            ValueError: If the mapping or a rule definition is invalid
        """
        if not isinstance(field_rules, Mapping):
            raise ValueError(f"Rules for resource '{resource}' must be a mapping of fields")

        rules = []
        for field_name, rule_list in field_rules.items():
            if not isinstance(rule_list, list):
                raise ValueError(f"Rules for field '{resource}.{field_name}' must be a list")

            for idx, rule_def in enumerate(rule_list):
                rules.append(cls._parse_rule(resource, field_name, rule_def, idx))
        return rules

    @staticmethod
    def _parse_rule(resource: str, field_name: str, rule_def: dict[str, Any], idx: int) -> dict[str, Any]:
        """
        Parse a single rule definition.

        Args:
            resource: The resource (order section) the field belongs to
            field_name: The field this rule applies to
            rule_def: The rule definition from YAML
            idx: Index of this rule for the field (for naming)

        Returns:
            Parsed rule dictionary

        Raises:
            ValueError: If rule definition is invalid
        """
        if not isinstance(rule_def, Mapping) or "type" not in rule_def:
            raise ValueError(f"Rule for field '{resource}.{field_name}' is missing 'type'")

        rule_type = rule_def["type"]
        rule_name = rule_def.get("name", f"{resource}_{field_name}_{rule_type}_{idx}")
        parameters = rule_def.get("params", rule_def.get("parameters", {})) or {}

        severity = rule_def.get("severity", "error")
        if severity not in SEVERITIES:
            raise ValueError(f"Invalid severity '{severity}' for rule '{rule_name}'. Must be 'error' or 'warning'")

        return {
            "rule_name": rule_name,
            "rule_type": rule_type,
            "resource": resource,
            "field_name": field_name,
            "parameters": dict(parameters),
            "severity": severity,
            "enabled": rule_def.get("enabled", True),
        }


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (for testing or dynamic rules).

    Rules are added for the current resource, selected with for_resource().
    """

    def __init__(self, resource: str = "personal"):
        """Initialize empty rule configuration."""
        self.rules: list[dict[str, Any]] = []
        self.resource = resource

    def for_resource(self, resource: str) -> "RuleConfigBuilder":
        """Switch the resource subsequent rules apply to."""
        self.resource = resource
        return self

    def _add(self, field_name: str, rule_type: str, parameters: dict[str, Any], severity: str = "error") -> "RuleConfigBuilder":
        self.rules.append({
            "rule_name": f"{self.resource}_{field_name}_{rule_type}",
            "rule_type": rule_type,
            "resource": self.resource,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": True,
        })
        return self

    def add_required_field(self, field_name: str, unless: str | None = None, allow_empty_string: bool = False) -> "RuleConfigBuilder":
        """Add a required field rule, optionally waived when another field is truthy."""
        params: dict[str, Any] = {"allow_empty_string": allow_empty_string}
        if unless:
            params["unless"] = unless
        return self._add(field_name, "required_field", params)

    def add_type_check(self, field_name: str, expected_type: str, coerce: bool = True) -> "RuleConfigBuilder":
        """Add a type check rule."""
        return self._add(field_name, "type_check", {"expected_type": expected_type, "coerce": coerce})

    def add_length(self, field_name: str, min_length: int | None = None, max_length: int | None = None) -> "RuleConfigBuilder":
        """Add a string length rule."""
        params = {}
        if min_length is not None:
            params["min"] = min_length
        if max_length is not None:
            params["max"] = max_length
        return self._add(field_name, "length", params)

    def add_regex(self, field_name: str, pattern: str, message: str | None = None, severity: str = "error") -> "RuleConfigBuilder":
        """Add a regex validation rule."""
        params: dict[str, Any] = {"pattern": pattern}
        if message:
            params["message"] = message
        return self._add(field_name, "regex", params, severity)

    def add_date(self, field_name: str, not_future: bool = False) -> "RuleConfigBuilder":
        """Add an ISO date format rule."""
        return self._add(field_name, "date", {"not_future": not_future})

    def add_date_after(self, field_name: str, other_field: str) -> "RuleConfigBuilder":
        """Add a rule requiring field_name not to be before other_field."""
        return self._add(field_name, "date_after", {"field": other_field})

    def add_custom(self, field_name: str, validator_func, error_message: str | None = None) -> "RuleConfigBuilder":
        """Add a rule backed by a Python callable."""
        params: dict[str, Any] = {"validator_func": validator_func}
        if error_message:
            params["error_message"] = error_message
        return self._add(field_name, "custom", params)

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules
