"""
ValidationResult model: field-path keyed validation messages (ephemeral display state).
"""

from collections.abc import Iterable

from pydantic import BaseModel, Field


def _has_prefix(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + ".")


class ValidationResult(BaseModel):
    """
    Outcome of a validation pass, keyed by dotted field path.

    Note: ValidationResult is ephemeral, never persisted. The orchestrator
    keeps one as its standing error state and merges later passes into it.

    Attributes:
        errors: path -> messages for failed "error" severity rules
        warnings: path -> messages for failed "warning" severity rules
    """

    errors: dict[str, list[str]] = Field(default_factory=dict)
    warnings: dict[str, list[str]] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "errors": {
                    "education.0.school_name": ["Field value is empty string"],
                    "education.0.end_date": [
                        "Value '2010-01' must not be before start_date '2012-09'"
                    ]
                },
                "warnings": {}
            }
        }

    @property
    def passed(self) -> bool:
        return not self.errors

    def add(self, path: str, message: str, severity: str = "error") -> None:
        bucket = self.errors if severity == "error" else self.warnings
        bucket.setdefault(path, []).append(message)

    def messages(self, path: str) -> list[str]:
        return list(self.errors.get(path, []))

    def paths(self) -> set[str]:
        return set(self.errors) | set(self.warnings)

    def merge_paths(self, other: "ValidationResult", examined: Iterable[str]) -> None:
        """
        Replace this result's entries for the examined paths with other's findings.

        Paths outside the examined set keep whatever they held before.
        """
        for path in examined:
            for mine, theirs in ((self.errors, other.errors), (self.warnings, other.warnings)):
                if path in theirs:
                    mine[path] = list(theirs[path])
                else:
                    mine.pop(path, None)

    def union(self, other: "ValidationResult") -> None:
        """Add other's messages, skipping duplicates already recorded for a path."""
        for mine, theirs in ((self.errors, other.errors), (self.warnings, other.warnings)):
            for path, messages in theirs.items():
                existing = mine.setdefault(path, [])
                existing.extend(message for message in messages if message not in existing)

    def scoped(self, prefix: str) -> "ValidationResult":
        """Entries whose path falls under prefix."""
        return ValidationResult(
            errors={p: list(m) for p, m in self.errors.items() if _has_prefix(p, prefix)},
            warnings={p: list(m) for p, m in self.warnings.items() if _has_prefix(p, prefix)},
        )

    def discard_scope(self, prefix: str) -> None:
        for bucket in (self.errors, self.warnings):
            for path in [p for p in bucket if _has_prefix(p, prefix)]:
                del bucket[path]

    def prefixed(self, prefix: str) -> "ValidationResult":
        """Copy with every path re-rooted under prefix."""
        if not prefix:
            return self.model_copy(deep=True)
        return ValidationResult(
            errors={f"{prefix}.{p}": list(m) for p, m in self.errors.items()},
            warnings={f"{prefix}.{p}": list(m) for p, m in self.warnings.items()},
        )
