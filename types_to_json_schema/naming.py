"""
Name registry for referenced types.

Assigns every referenced type identity a unique definition name and
handles collisions between distinct types that display the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .oracle.base import TypeOracle
from .oracle.model import TypeInfo
from .utils import strip_file_names


@dataclass
class TypeNameRegistry:
    """Assigns unique definition names to type identities."""

    oracle: TypeOracle

    # Type id -> assigned name
    names_by_id: dict[int, str] = field(default_factory=dict)

    # Names already handed out
    names_used: set[str] = field(default_factory=set)

    def name_for(self, typ: TypeInfo) -> str:
        """
        Get or assign the unique name of a type.

        The first type displayed as ``Name`` gets ``Name``; later distinct
        types displayed the same way get ``Name_1``, ``Name_2``, ...

        Args:
            typ: The type to name

        Returns:
            The definition name of the type
        """
        if typ.id in self.names_by_id:
            return self.names_by_id[typ.id]

        base_name = strip_file_names(self.oracle.type_to_string(typ))
        name = base_name
        suffix = 1
        while name in self.names_used:
            name = f"{base_name}_{suffix}"
            suffix += 1

        self.names_by_id[typ.id] = name
        self.names_used.add(name)
        return name
