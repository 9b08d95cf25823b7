"""Structured-data export in neutral formats.

Data is serialized as JSON or YAML, chosen by the file extension. These
formats replace the language-specific source-literal export used by older
releases; files written by those releases cannot be loaded back.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import JsonValue, TypeAdapter, ValidationError

FORMAT_JSON = "json"
FORMAT_YAML = "yaml"

# Recognized export extensions (lowercase) and their formats
EXPORT_EXTENSIONS = {
    ".json": FORMAT_JSON,
    ".yaml": FORMAT_YAML,
    ".yml": FORMAT_YAML,
}

_json_value = TypeAdapter(JsonValue)


class InvalidExportPathError(ValueError):
    """Export path does not end in a recognized extension."""

    pass


def export_format(path: str | Path) -> str:
    """Get the export format for a path.

    Args:
        path: Target file path.

    Returns:
        One of FORMAT_JSON or FORMAT_YAML.

    Raises:
        InvalidExportPathError: If the extension is not recognized.
    """
    suffix = Path(path).suffix.lower()
    try:
        return EXPORT_EXTENSIONS[suffix]
    except KeyError:
        allowed = ", ".join(sorted(EXPORT_EXTENSIONS))
        raise InvalidExportPathError(
            f"Invalid export file type '{path}', expected one of: {allowed}"
        ) from None


def validate_data(data: Any) -> JsonValue:
    """Check that data is a nested structure of scalars, sequences and mappings.

    Raises:
        ValueError: If data contains anything else.
    """
    try:
        return _json_value.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Data cannot be exported: {e}") from e


def dumps(data: Any, fmt: str) -> str:
    """Serialize data in the given format."""
    value = validate_data(data)
    if fmt == FORMAT_YAML:
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return json.dumps(value, indent=2, ensure_ascii=False) + "\n"


def loads(content: str, fmt: str) -> Any:
    """Parse content written by dumps().

    Raises:
        ValueError: If content is not valid for the format.
    """
    if fmt == FORMAT_YAML:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML export: {e}") from e
    return json.loads(content)
