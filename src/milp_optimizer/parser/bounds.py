from __future__ import annotations

from typing import Any, Dict

from ..schemas import BoundFact


class BoundsBuilder:
    """Accumulates per-variable domain facts across Bounds/Integer/Binary lines.

    Every method touches only its own fields, so declarations merge in file
    order. ``mark_binary`` is the exception: it also resets lower/upper to
    0/1, overwriting anything an earlier bound line set.
    """

    def __init__(self) -> None:
        self._facts: Dict[str, BoundFact] = {}

    def _update(self, name: str, **fields: Any) -> None:
        fact = self._facts.get(name, BoundFact())
        self._facts[name] = fact.model_copy(update=fields)

    def __contains__(self, name: str) -> bool:
        return name in self._facts

    def set_lower(self, name: str, value: float) -> None:
        self._update(name, lower=value)

    def set_upper(self, name: str, value: float) -> None:
        self._update(name, upper=value)

    def fix(self, name: str, value: float) -> None:
        self._update(name, lower=value, upper=value)

    def mark_free(self, name: str) -> None:
        self._update(name, is_free=True)

    def mark_integer(self, name: str) -> None:
        self._update(name, kind="integer")

    def mark_binary(self, name: str) -> None:
        self._update(name, kind="binary", lower=0.0, upper=1.0)

    def build(self) -> Dict[str, BoundFact]:
        return dict(self._facts)
