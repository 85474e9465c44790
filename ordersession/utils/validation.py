"""
Input validation utilities for the order editing session.

Provides reusable validation functions for identifiers and field paths
supplied by callers, so malformed input is rejected before it reaches a
store or is used to walk into a record.
"""

import re
from collections.abc import Iterable


class InputValidationError(ValueError):
    """Raised when caller-supplied input is malformed."""
    pass


_FIELD_PATH_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*(\.([a-zA-Z_][a-zA-Z0-9_]*|[0-9]+))*$')


def validate_order_id(order_id: str, field_name: str = "order_id") -> str:
    """
    Validate an order or invitation ID.

    IDs must be non-empty strings containing only alphanumeric characters,
    hyphens, underscores and dots.

    Args:
        order_id: The ID to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated ID (stripped of whitespace)

    Raises:
        InputValidationError: If validation fails

    Examples:
        >>> validate_order_id("ORD-1001")
        'ORD-1001'
        >>> validate_order_id("invalid id!")  # doctest: +SKIP
        InputValidationError: order_id contains invalid characters
    """
    if not order_id or not isinstance(order_id, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    order_id = order_id.strip()

    if not order_id:
        raise InputValidationError(f"{field_name} cannot be empty or whitespace-only")

    if not re.match(r'^[a-zA-Z0-9_\-\.]+$', order_id):
        raise InputValidationError(
            f"{field_name} contains invalid characters. "
            "Only alphanumeric, hyphens, underscores, and dots are allowed."
        )

    if len(order_id) > 255:
        raise InputValidationError(f"{field_name} exceeds maximum length of 255 characters")

    return order_id


def validate_field_path(path: str, field_name: str = "path") -> str:
    """
    Validate a dotted field path such as "education.0.start_date".

    Segments are identifiers or list indexes; the first segment must be an
    identifier.

    Raises:
        InputValidationError: If the path is empty or malformed
    """
    if not path or not isinstance(path, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    if not _FIELD_PATH_PATTERN.match(path):
        raise InputValidationError(f"{field_name} '{path}' is not a valid dotted field path")

    return path


def validate_section_key(section_key: str, known_sections: Iterable[str], field_name: str = "section_key") -> str:
    """
    Validate that a section key names a known order section.

    Raises:
        InputValidationError: If the section is unknown
    """
    known = list(known_sections)
    if section_key not in known:
        raise InputValidationError(
            f"{field_name} '{section_key}' is not one of: {', '.join(sorted(known))}"
        )
    return section_key


def validate_file_path(file_path: str, field_name: str = "file_path") -> str:
    """
    Validate a file path used for configuration or file-backed stores.

    Prevents path traversal attacks and null bytes.

    Raises:
        InputValidationError: If validation fails
    """
    if not file_path or not isinstance(file_path, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    file_path = file_path.strip()

    if not file_path:
        raise InputValidationError(f"{field_name} cannot be empty or whitespace-only")

    if '..' in file_path:
        raise InputValidationError(f"{field_name} contains path traversal characters (..)")

    if '\x00' in file_path:
        raise InputValidationError(f"{field_name} contains null bytes")

    if len(file_path) > 4096:
        raise InputValidationError(f"{field_name} exceeds maximum length of 4096 characters")

    return file_path
