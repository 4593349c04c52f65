"""Sorts for MM0-style theories.

A sort is a name for a syntactic category (e.g. ``wff`` for formulas,
``set`` for set variables). Each sort carries a set of modifiers that
restrict how it may be used:

- pure:     no term constructor may return this sort
- strict:   no bound variable may range over this sort
- provable: hypotheses and conclusions of assertions live in this sort
- free:     regular variables of this sort may not carry dependencies

Sorts are declared in the signature and referenced by name (SortRef)
everywhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag
from typing import NewType

# ---------------------------------------------------------------------------
# Sort references: wherever a sort is used, it is a plain string name.
# The actual sort declaration lives in the Signature.
# ---------------------------------------------------------------------------

SortRef = NewType("SortRef", str)


class SortModifier(Flag):
    NONE = 0
    PURE = 1
    STRICT = 2
    PROVABLE = 4
    FREE = 8

    @classmethod
    def from_keyword(cls, word: str) -> SortModifier:
        try:
            return cls[word.upper()]
        except KeyError:
            raise ValueError(f"Unknown sort modifier: {word}") from None

    @property
    def keywords(self) -> tuple[str, ...]:
        """Modifier keywords in declaration order (pure strict provable free)."""
        return tuple(
            m.name.lower()
            for m in (SortModifier.PURE, SortModifier.STRICT,
                      SortModifier.PROVABLE, SortModifier.FREE)
            if m in self and m.name is not None
        )


MODIFIER_KEYWORDS = ("pure", "strict", "provable", "free")


@dataclass(frozen=True)
class SortDecl:
    """A declared sort.

    Example:
        provable sort wff;   — SortDecl(SortRef("wff"), SortModifier.PROVABLE)
    """

    name: SortRef
    modifiers: SortModifier = SortModifier.NONE

    @property
    def is_pure(self) -> bool:
        return SortModifier.PURE in self.modifiers

    @property
    def is_strict(self) -> bool:
        return SortModifier.STRICT in self.modifiers

    @property
    def is_provable(self) -> bool:
        return SortModifier.PROVABLE in self.modifiers

    @property
    def is_free(self) -> bool:
        return SortModifier.FREE in self.modifiers
