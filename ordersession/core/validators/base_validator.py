"""
Field validators: one configured rule checked against one sub-resource field.

A validator carries where its rule applies (resource kind and field), how a
failure is reported (severity) and the rule's parameters. check() returns the
failure message, or None when the value passes.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel

SEVERITIES = ("error", "warning")


class FieldValidator(ABC):
    """
    Abstract base class for field validators.

    Subclasses set rule_type and implement check(). Values of other fields
    of the same sub-resource are passed along for cross-field rules.
    """

    rule_type: ClassVar[str] = ""

    def __init__(
        self,
        field_name: str,
        parameters: dict[str, Any] | None = None,
        *,
        resource: str = "",
        severity: str = "error",
        rule_name: str | None = None,
    ):
        """
        Args:
            field_name: Field of the sub-resource the rule checks
            parameters: Rule-specific parameters (e.g. max for length)
            resource: Order section whose entries the rule applies to
            severity: "error" or "warning"
            rule_name: Rule identifier; derived from resource, field and type if omitted

        Raises:
            ValueError: If severity is unknown
        """
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity '{severity}', expected one of {SEVERITIES}")

        self.field_name = field_name
        self.parameters = parameters or {}
        self.resource = resource
        self.severity = severity
        self.rule_name = rule_name or f"{resource}_{field_name}_{self.rule_type}"

    @abstractmethod
    def check(self, value: Any, values: Mapping[str, Any]) -> str | None:
        """
        Check one field value.

        Args:
            value: The field value
            values: Every field value of the sub-resource

        Returns:
            The failure message, or None when the value passes
        """

    def applies_to(self, resource_kind: str) -> bool:
        return self.resource == resource_kind

    def check_resource(self, resource: BaseModel) -> str | None:
        """check() against the named field of a sub-resource."""
        values = resource.model_dump()
        return self.check(values.get(self.field_name), values)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(rule={self.rule_name}, resource={self.resource}, "
            f"field={self.field_name}, severity={self.severity})"
        )
