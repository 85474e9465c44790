"""
Rule engine for applying validation rules to orders and sub-resources.

The rule engine builds validators from rule configurations, scopes them to
the resource kinds an invitation's requirements actually request, and
produces path-keyed validation results.
"""

from collections.abc import Collection, Iterator
from typing import Any

from ordersession.core.models import Order, Requirements, SubResource, ValidationResult
from ordersession.core.rules.rule_config import RuleConfigLoader
from ordersession.core.validators import (
    CustomValidator,
    DateOrderValidator,
    DateValidator,
    FieldValidator,
    LengthValidator,
    RegexValidator,
    RequiredFieldValidator,
    TypeValidator,
)
from ordersession.observability.metrics import record_validation_failure


class RuleEngine:
    """
    Applies validation rules to a whole order or to a single sub-resource.

    Rules are keyed by resource (order section). Validating an Order yields
    paths like "education.0.start_date"; validating a lone sub-resource
    yields bare field names like "start_date".
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "type_check": TypeValidator,
        "length": LengthValidator,
        "regex": RegexValidator,
        "date": DateValidator,
        "date_after": DateOrderValidator,
        "custom": CustomValidator,
    }

    def __init__(self, rules: list[dict[str, Any]]):
        """
        Initialize the rule engine with validation rules.

        Args:
            rules: List of rule configurations, each containing:
                   - rule_name: str
                   - rule_type: str (see VALIDATOR_REGISTRY)
                   - resource: str (order section the rule belongs to)
                   - field_name: str
                   - parameters: Dict[str, Any] (optional)
                   - severity: str (error or warning)
                   - enabled: bool (default True)
        """
        self.rules = rules
        self.validators: list[FieldValidator] = []
        self._build_validators()

    @classmethod
    def from_requirements(cls, base_rules: list[dict[str, Any]], requirements: Requirements) -> "RuleEngine":
        """
        Build an engine scoped to the services an invitation requires.

        Base rules for resources the requirements do not name are dropped;
        rules supplied in a component's constraints ("rules" mapping of
        field -> rule definitions) are added for that resource.
        """
        requested = set(requirements.service_keys)
        rules = [rule for rule in base_rules if rule["resource"] in requested]

        for component in requirements.components:
            extra = component.constraints.get("rules")
            if extra:
                rules.extend(RuleConfigLoader.parse_field_rules(component.name, extra))

        return cls(rules)

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            try:
                validator = validator_class(
                    rule["field_name"],
                    rule.get("parameters", {}),
                    resource=rule["resource"],
                    severity=rule.get("severity", "error"),
                    rule_name=rule_name,
                )
            except ValueError as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}")

            self.validators.append(validator)

    @staticmethod
    def resource_kind(resource: SubResource) -> str:
        """Section key whose entries have the resource's type."""
        for section_key, resource_class in Order.SECTION_TYPES.items():
            if type(resource) is resource_class:
                return section_key
        raise ValueError(f"No order section holds {type(resource).__name__} resources")

    def _checks(self, target: Order | SubResource) -> Iterator[tuple[str, FieldValidator, dict[str, Any]]]:
        """Yield (path, validator, field values) for every applicable rule."""
        if isinstance(target, Order):
            entries = []
            for section_key in Order.SECTION_TYPES:
                section = getattr(target, section_key)
                if isinstance(section, list):
                    entries.extend((section_key, f"{section_key}.{i}.", entry) for i, entry in enumerate(section))
                elif section is not None:
                    entries.append((section_key, f"{section_key}.", section))
        else:
            entries = [(self.resource_kind(target), "", target)]

        for kind, prefix, entry in entries:
            values = entry.model_dump()
            for validator in self.validators:
                if validator.applies_to(kind):
                    yield prefix + validator.field_name, validator, values

    def validate(self, target: Order | SubResource, fields: Collection[str] | None = None) -> ValidationResult:
        """
        Validate target against every applicable rule.

        Args:
            target: An Order or a single sub-resource
            fields: When given, only rules for these paths run

        Returns:
            ValidationResult keyed by path
        """
        result = ValidationResult()

        for path, validator, values in self._checks(target):
            if fields is not None and path not in fields:
                continue

            message = validator.check(values.get(validator.field_name), values)
            if message is not None:
                result.add(path, message, validator.severity)
                record_validation_failure(validator.rule_type, validator.field_name)

        return result

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts by type, severity and resource
        """
        return {
            "total_rules": len(self.validators),
            "rules_by_type": self._count(lambda validator: validator.rule_type),
            "rules_by_severity": self._count(lambda validator: validator.severity),
            "rules_by_resource": self._count(lambda validator: validator.resource),
        }

    def _count(self, key) -> dict[str, int]:
        counts: dict[str, int] = {}
        for validator in self.validators:
            name = key(validator)
            counts[name] = counts.get(name, 0) + 1
        return counts
