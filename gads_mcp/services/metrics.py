"""Pure row / micros helpers (no remote access)."""

from __future__ import annotations

from typing import Any, Mapping

MICROS_PER_UNIT = 1_000_000


def micros_to_units(micros: int | float) -> float:
    """Convert micros to major currency units (1_500_000 -> 1.5)."""
    return micros / MICROS_PER_UNIT


def flatten_row(row: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten a nested result row into dotted keys.

    ``{"campaign": {"id": "1"}}`` becomes ``{"campaign.id": "1"}``.  Lists
    are kept as-is.  Every numeric ``*_micros`` leaf also gets a sibling
    key without the suffix holding the value in major units; the micros
    key itself is kept unchanged.
    """
    flat: dict[str, Any] = {}
    for key, value in row.items():
        new_key = f"{prefix}.{key}" if prefix else key

        if value is None:
            flat[new_key] = None
        elif isinstance(value, Mapping):
            flat.update(flatten_row(value, new_key))
        elif isinstance(value, list):
            flat[new_key] = value
        elif (
            key.endswith("_micros")
            and isinstance(value, (int, float))
            and not isinstance(value, bool)
        ):
            flat[new_key.replace("_micros", "", 1)] = micros_to_units(value)
            flat[new_key] = value
        else:
            flat[new_key] = value
    return flat


def pluralize(count: int, noun: str) -> str:
    """``"1 row"`` / ``"3 rows"``."""
    return f"{count} {noun}{'' if count == 1 else 's'}"
