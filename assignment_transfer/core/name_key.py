"""Join keys for relationships resolved by human-readable name.

The section hierarchy view identifies the responsible team and the
responsible person by *name*, not by id. Every join that goes through such
a name is expressed with :class:`NameKey` so that it stays visible in the
types, and every lookup returns a :class:`NameResolution` that keeps all
candidates: a name shared by several entities is an ambiguity, never a
silent first match.
"""

from typing import Generic, NamedTuple, TypeVar

T = TypeVar("T")


class NameKey(NamedTuple):
    """A join key made of an entity's display name.

    Fragile to renames: two views only agree as long as both carry the
    same spelling. Surrounding whitespace is ignored, case is not.
    """

    name: str

    @classmethod
    def of(cls, name: str | None) -> "NameKey | None":
        """Build a key from a raw name, or None if the name is blank."""
        if name is None or not (stripped := name.strip()):
            return None
        return cls(stripped)

    def __str__(self) -> str:
        return self.name


class NameResolution(NamedTuple, Generic[T]):
    """Outcome of resolving a :class:`NameKey` against a set of entities."""

    key: NameKey
    candidates: tuple[T, ...]

    @property
    def is_resolved(self) -> bool:
        """True if exactly one entity carries the name."""
        return len(self.candidates) == 1

    @property
    def is_ambiguous(self) -> bool:
        """True if several entities share the name."""
        return len(self.candidates) > 1

    @property
    def is_missing(self) -> bool:
        """True if no entity carries the name."""
        return not self.candidates

    def unique(self) -> T | None:
        """Return the single matching entity, or None if missing or ambiguous."""
        return self.candidates[0] if self.is_resolved else None
