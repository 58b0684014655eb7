"""Food item records and the rules that validate their fields."""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

TEXT_FIELDS = ("qty", "n")
NUMERIC_FIELDS = ("cal", "p", "c", "f", "fib")
KNOWN_FIELDS = frozenset(TEXT_FIELDS + NUMERIC_FIELDS)
MICRONUTRIENT_UNITS = ("mg", "mcg", "iu", "g", "mgdL", "mmolL")
MICRONUTRIENT_KEY_PATTERN = re.compile(
    r"[a-z]{1,4}_(?:" + "|".join(MICRONUTRIENT_UNITS) + r")", re.IGNORECASE
)

SanitizedItem = dict[str, str | int | float]


def is_number(value: object) -> bool:
    """Return true for JSON numbers that fit a finite float (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def is_micronutrient_key(key: object) -> bool:
    """Return true when the key has the `<abbr>_<unit>` shape."""
    return isinstance(key, str) and MICRONUTRIENT_KEY_PATTERN.fullmatch(key) is not None


@dataclass(frozen=True)
class FoodItem:
    """One food entry with optional macros and micronutrients.

    Wire keys are the short ones the language model is asked for:
    ``qty``, ``n``, ``cal``, ``p``, ``c``, ``f``, ``fib`` and any number of
    ``<abbr>_<unit>`` micronutrient keys.
    """

    quantity: str | None = None
    name: str | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    fiber_g: float | None = None
    micronutrients: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: object) -> "FoodItem":
        """Build an item keeping only fields with the expected type.

        Wrong types are dropped, never coerced. Anything that is not a
        mapping yields an empty item.
        """
        if not isinstance(payload, Mapping):
            return cls()
        micronutrients: dict[str, float] = {}
        for key, value in payload.items():
            if key in KNOWN_FIELDS:
                continue
            if is_number(value) and is_micronutrient_key(key):
                micronutrients[key] = value
        return cls(
            quantity=_text(payload.get("qty")),
            name=_text(payload.get("n")),
            calories=_number(payload.get("cal")),
            protein_g=_number(payload.get("p")),
            carbs_g=_number(payload.get("c")),
            fat_g=_number(payload.get("f")),
            fiber_g=_number(payload.get("fib")),
            micronutrients=micronutrients,
        )

    def to_payload(self) -> SanitizedItem:
        """Return the wire representation, omitting absent fields."""
        payload: SanitizedItem = {}
        for key, value in (
            ("qty", self.quantity),
            ("n", self.name),
            ("cal", self.calories),
            ("p", self.protein_g),
            ("c", self.carbs_g),
            ("f", self.fat_g),
            ("fib", self.fiber_g),
        ):
            if value is not None:
                payload[key] = value
        payload.update(self.micronutrients)
        return payload

    @property
    def label(self) -> str:
        """Quantity and name joined for display."""
        return f"{self.quantity or ''} {self.name or ''}".strip()


@dataclass(frozen=True)
class NormalizationResult:
    """Structured output of the normalization pipeline."""

    items: list[SanitizedItem]

    @classmethod
    def empty(cls) -> "NormalizationResult":
        """Return the canonical empty result."""
        return cls(items=[])

    def to_payload(self) -> dict[str, list[SanitizedItem]]:
        """Return the response body."""
        return {"items": self.items}


def _text(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _number(value: object) -> float | None:
    return value if is_number(value) else None
