"""
Arena of named definitions ("reffed definitions").

A referenced type is reserved under its name before its definition is
built, so a type that refers to itself finds the name and gets a $ref
instead of recursing forever.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class DefinitionHandle:
    """Forward reference to a reserved definition.

    The definition dict is the placeholder stored in the arena; building
    into it builds the arena entry.
    """

    name: str
    definition: dict[str, Any]
    arena: DefinitionArena

    def complete(self) -> None:
        self.arena.pending.discard(self.name)


@dataclass
class DefinitionArena:
    """Named definitions referenced through ``#/definitions/<name>``."""

    entries: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Names reserved whose definition is still being built
    pending: set[str] = field(default_factory=set)

    def reserve(self, name: str, placeholder: dict[str, Any] | None = None) -> DefinitionHandle:
        """
        Register a placeholder definition under a name.

        Args:
            name: Definition name
            placeholder: Dict to use as the (partial) definition

        Returns:
            Handle used to fill the definition
        """
        definition = placeholder if placeholder is not None else {}
        self.entries[name] = definition
        self.pending.add(name)
        return DefinitionHandle(name, definition, self)

    def put(self, name: str, definition: dict[str, Any]) -> None:
        """Store a finished definition, replacing any existing one."""
        self.entries[name] = definition
        self.pending.discard(name)

    def discard(self, name: str) -> None:
        """Drop a definition and its pending mark."""
        self.entries.pop(name, None)
        self.pending.discard(name)

    def rollback(self, names: set[str]) -> None:
        """Drop every definition whose name is not in ``names``."""
        for name in [n for n in self.entries if n not in names]:
            self.discard(name)

    def is_pending(self, name: str) -> bool:
        return name in self.pending

    def get(self, name: str) -> dict[str, Any] | None:
        return self.entries.get(name)

    def as_dict(self) -> dict[str, dict[str, Any]]:
        return self.entries

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)
