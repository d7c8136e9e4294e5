"""The kinds of values a datastore entry can hold."""

from __future__ import annotations

import enum
from typing import Any

from ume.ragged import RaggedRight
from ume.vecn import Vec3


class DSType(enum.Enum):
    """Datastore value kinds."""

    INT = enum.auto()
    INTV = enum.auto()
    INTRR = enum.auto()
    DBL = enum.auto()
    DBLV = enum.auto()
    DBLRR = enum.auto()
    VEC3 = enum.auto()
    VEC3V = enum.auto()
    VEC3RR = enum.auto()
    NONE = enum.auto()

    def element_length(self) -> int:
        """Number of base scalars making up one element of this kind."""
        if self is DSType.NONE:
            raise ValueError("NONE has no element length")
        if self in (DSType.VEC3, DSType.VEC3V, DSType.VEC3RR):
            return 3
        return 1


def default_value(dstype: DSType) -> Any:
    """Return a fresh empty value for ``dstype``."""
    factories = {
        DSType.INT: int,
        DSType.INTV: list,
        DSType.INTRR: RaggedRight,
        DSType.DBL: float,
        DSType.DBLV: list,
        DSType.DBLRR: RaggedRight,
        DSType.VEC3: Vec3,
        DSType.VEC3V: list,
        DSType.VEC3RR: RaggedRight,
    }
    factory = factories.get(dstype)
    return None if factory is None else factory()