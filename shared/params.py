"""Declarative parameter schema.

A processor's parameter contract is defined as a list of ParamDef objects.
ParamSchema wraps the list and derives defaults, ranges and a validating
clamp for raw dicts (presets, CLI overrides).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ParamType(Enum):
    FLOAT = "float"
    CHOICE = "choice"


@dataclass
class ParamDef:
    key: str
    type: ParamType
    default: Any
    section: str
    label: str = ""
    range: tuple | None = None  # (min, max) for continuous params
    choices: list[str] | None = None  # accepted names for CHOICE type


class ParamSchema:
    """Derives defaults, ranges and validation from a declarative param list."""

    def __init__(self, params: list[ParamDef]):
        self._params = params
        self._by_key: dict[str, ParamDef] = {p.key: p for p in params}

    def default_params(self) -> dict:
        return {p.key: p.default for p in self._params}

    def param_ranges(self) -> dict[str, tuple]:
        """Continuous params only (float with range)."""
        return {p.key: p.range for p in self._params
                if p.range is not None and p.type == ParamType.FLOAT}

    def param_sections(self) -> dict[str, list[str]]:
        sections: dict[str, list[str]] = {}
        for p in self._params:
            sections.setdefault(p.section, []).append(p.key)
        return sections

    def validate_and_clamp(self, raw: dict) -> dict:
        """Validate and clamp a raw params dict (e.g. from a JSON preset).

        Unknown keys are dropped. Floats are cast and clamped to range;
        values that cannot be cast are dropped. A CHOICE value outside
        its choices raises ValueError.
        """
        result = {}
        for key, value in raw.items():
            p = self._by_key.get(key)
            if p is None:
                continue

            if p.type == ParamType.CHOICE:
                if p.choices and value not in p.choices:
                    raise ValueError(
                        f"Unknown {key} '{value}'. Options: {p.choices}")
                result[key] = value
                continue

            try:
                v = float(value)
            except (TypeError, ValueError):
                continue
            if p.range:
                lo, hi = p.range
                v = max(lo, min(hi, v))
            result[key] = v

        return result

    def get(self, key: str) -> ParamDef | None:
        return self._by_key.get(key)
