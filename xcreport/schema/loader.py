"""JSON loading and record parsing."""

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import RecordLoadError, RecordValidationError

RecordT = TypeVar("RecordT", bound=BaseModel)


def unwrap_typed_json(value: Any) -> Any:
    """Strip the `_type`/`_value`/`_values` wrappers of a raw bundle export.

    Already-plain JSON passes through unchanged.

    Args:
        value: Decoded JSON data.

    Returns:
        The same data with every typed wrapper replaced by its payload.
    """
    if isinstance(value, dict):
        if "_values" in value:
            return [unwrap_typed_json(v) for v in value["_values"]]
        if "_value" in value:
            return value["_value"]
        return {k: unwrap_typed_json(v) for k, v in value.items() if k != "_type"}
    if isinstance(value, list):
        return [unwrap_typed_json(v) for v in value]
    return value


def load_json(path: str | Path) -> Any:
    """Load a JSON file and unwrap it.

    Args:
        path: Path to the JSON file.

    Returns:
        The decoded, unwrapped data.

    Raises:
        RecordLoadError: If the file cannot be read or parsed.
    """
    path = Path(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RecordLoadError(f"Invalid JSON: {e}", str(path)) from e
    except OSError as e:
        raise RecordLoadError(f"Cannot read file: {e}", str(path)) from e

    return unwrap_typed_json(data)


def parse_record(model_cls: type[RecordT], data: Any) -> RecordT:
    """Validate resolved data into a record model.

    Args:
        model_cls: The record class to validate against.
        data: The resolved data.

    Returns:
        The validated record.

    Raises:
        RecordValidationError: If the data fails validation.
    """
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "loc": ".".join(str(x) for x in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise RecordValidationError(
            f"{model_cls.__name__} validation failed with {len(errors)} error(s)",
            errors,
        ) from e
