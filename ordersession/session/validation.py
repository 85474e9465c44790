"""
Validation orchestration for an editing session.

The orchestrator owns the session's standing error state and runs two
kinds of pass against requirement-scoped rules:

- live (partial) passes after a single field edit, which replace the
  errors of the paths they examine and leave every other path alone
- render (full) passes over the whole dirty record, which replace the
  standing state but carry over entries tagged with a draft scope, since
  a draft entry is not part of the record yet
"""

from collections.abc import Iterable
from typing import Any

from ordersession.core.models import Order, Requirements, SubResource, ValidationResult
from ordersession.core.rules import RuleEngine
from ordersession.core.snapshot import SnapshotDiffer
from ordersession.observability.logger import get_logger
from ordersession.observability.metrics import record_validation_pass
from ordersession.session.errors import RequirementsNotFoundError
from ordersession.utils.paths import get_path, parent_path

logger = get_logger(__name__)


class ValidationOrchestrator:
    """
    Runs validation passes and merges their results into standing state.

    Args:
        base_rules: Rule configurations (see RuleConfigLoader); scoped to
                    each invitation's requirements before use
        cache_full_pass: Reuse the previous full-pass result while neither
                         the record nor the requirements have changed
    """

    def __init__(self, base_rules: list[dict[str, Any]], cache_full_pass: bool = True):
        self.base_rules = base_rules
        self.cache_full_pass = cache_full_pass
        self.errors = ValidationResult()
        self.draft_scopes: set[str] = set()
        self._engine_cache: tuple[Requirements, RuleEngine] | None = None
        self._last_full: tuple[Order | SubResource, Requirements, ValidationResult] | None = None

    def _engine(self, requirements: Requirements | None) -> RuleEngine:
        if requirements is None:
            raise RequirementsNotFoundError("unknown", "Requirements could not be resolved for validation")

        if self._engine_cache and SnapshotDiffer.is_equal(self._engine_cache[0], requirements):
            return self._engine_cache[1]

        engine = RuleEngine.from_requirements(self.base_rules, requirements)
        self._engine_cache = (SnapshotDiffer.clone(requirements), engine)
        return engine

    def validate_fields(
        self,
        target: Order | SubResource,
        requirements: Requirements | None,
        field_paths: Iterable[str],
    ) -> ValidationResult:
        """
        Validate only the listed paths of target.

        Raises:
            RequirementsNotFoundError: If requirements is None
        """
        engine = self._engine(requirements)
        record_validation_pass("partial")
        return engine.validate(target, set(field_paths))

    def validate_all(self, target: Order | SubResource, requirements: Requirements | None) -> ValidationResult:
        """
        Validate every field of target.

        Raises:
            RequirementsNotFoundError: If requirements is None
        """
        engine = self._engine(requirements)
        record_validation_pass("full")
        return engine.validate(target)

    @staticmethod
    def touched_paths(target: Order | SubResource, field_path: str) -> set[str]:
        """
        Paths a live pass examines after field_path was edited.

        Every non-empty field of the edited sub-resource, plus field_path
        itself (an emptied field may be exactly what is wrong).
        """
        if isinstance(target, SubResource):
            resource, prefix = target, ""
        else:
            parent = parent_path(field_path)
            resource = get_path(target, parent) if parent else None
            prefix = f"{parent}." if parent else ""

        touched = {field_path}
        if isinstance(resource, SubResource):
            touched.update(prefix + name for name in resource.filled_fields())
        return touched

    def validate_edit(
        self,
        target: Order | SubResource,
        requirements: Requirements | None,
        field_path: str,
        scope: str = "",
    ) -> ValidationResult:
        """
        Live pass after a single field edit, merged into standing state.

        Args:
            target: The record, or a lone sub-resource such as a draft entry
            requirements: Requirements the rules are scoped to
            field_path: Path of the edited field, relative to target
            scope: Prefix the findings are stored under (e.g. "new_entry")

        Returns:
            The pass's own findings, with paths relative to target
        """
        touched = self.touched_paths(target, field_path)
        result = self.validate_fields(target, requirements, touched)

        examined = {f"{scope}.{path}" if scope else path for path in touched}
        self.errors.merge_paths(result.prefixed(scope), examined)

        logger.debug(
            "Live validation pass",
            extra={"field_path": field_path, "scope": scope, "examined": len(examined), "errors": len(result.errors)},
        )
        return result

    def register_draft_scope(self, scope: str) -> None:
        """Mark scope as holding draft entries that full passes must preserve."""
        self.draft_scopes.add(scope)

    def clear_scope(self, scope: str) -> None:
        """Drop every standing entry under scope."""
        self.errors.discard_scope(scope)

    def _full_pass(self, record: Order, requirements: Requirements | None) -> ValidationResult:
        if self.cache_full_pass and self._last_full and requirements is not None:
            last_record, last_requirements, last_result = self._last_full
            if SnapshotDiffer.is_equal(last_record, record) and SnapshotDiffer.is_equal(last_requirements, requirements):
                record_validation_pass("cached")
                return last_result.model_copy(deep=True)

        result = self.validate_all(record, requirements)
        if self.cache_full_pass:
            self._last_full = (SnapshotDiffer.clone(record), SnapshotDiffer.clone(requirements), result.model_copy(deep=True))
        return result

    def validate_render(self, record: Order, requirements: Requirements | None) -> ValidationResult:
        """
        Full pass over the dirty record, replacing the standing state.

        Entries under registered draft scopes are captured first and added
        back after the replace.

        Returns:
            The new standing state
        """
        preserved = ValidationResult()
        for scope in self.draft_scopes:
            preserved.union(self.errors.scoped(scope))

        standing = self._full_pass(record, requirements)
        standing.union(preserved)
        self.errors = standing

        logger.debug(
            "Render validation pass",
            extra={"errors": len(standing.errors), "preserved": len(preserved.errors)},
        )
        return self.errors

    def reset(self) -> None:
        self.errors = ValidationResult()
        self._last_full = None
