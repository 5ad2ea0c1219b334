"""Catalogue dataclasses — module types and combination errors."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModuleType:
    """A rectangular module kind.

    ``width`` is the short side and ``length`` the long side.  An
    unrotated instance spans ``length`` horizontally and ``width``
    vertically.
    """

    id: int             # 0-based index into the catalogue
    width: float
    length: float

    @property
    def area(self) -> float:
        return self.width * self.length

    @property
    def name(self) -> str:
        """Display name, numbered from 1 as in combination strings."""
        return f"Module_Type {self.id + 1}"


@dataclass
class ValidationError:
    type_index: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"[Module_Type {self.type_index + 1}] {self.field}: {self.message}"


class InvalidCombinationError(ValueError):
    """Raised when a module count map cannot be searched."""

    def __init__(self, type_index: int | None, count: int | None, reason: str) -> None:
        self.type_index = type_index
        self.count = count
        self.reason = reason
        where = "" if type_index is None else f" (type index {type_index})"
        super().__init__(f"Invalid combination{where}: {reason}")
