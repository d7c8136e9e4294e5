"""Mesh corners: subzonal volumes around each point of a zone."""

from __future__ import annotations

from typing import Any

from ume.datastore import DSEntry
from ume.ds_types import DSType
from ume.entity import Entity, EntityField, MeshBase
from ume.ragged import RaggedRight
from ume.utils import BinaryReader, BinaryWriter
from ume.vecn import Vec3

_TAG = "corners"
_MAPS = ("m:c>p", "m:c>z")


def _checked(index: int, length: int) -> int:
    if not 0 <= index < length:
        raise IndexError(f"index {index} out of range for length {length}")
    return index


class Corners(Entity):
    """Mesh corners, with corner-to-point and corner-to-zone connectivity."""

    def __init__(self, mesh: MeshBase) -> None:
        super().__init__(mesh)
        ds = self.ds()
        for name in _MAPS:
            ds.insert(name, DSEntry(DSType.INTV))
        ds.insert("corner_vol", CornerVolume(self))
        ds.insert("corner_csurf", CornerCsurf(self))
        ds.insert("m:c>ss", CornerToSides(self))

    def write(self, writer: BinaryWriter) -> None:
        """Write the corners in the binary mesh format."""
        writer.write_string(_TAG)
        super().write(writer)
        self._write_int_fields(writer, _MAPS)

    def read(self, reader: BinaryReader) -> None:
        """Read corners written by :meth:`write`."""
        tag = reader.read_string()
        if tag != _TAG:
            raise ValueError(f'expected "{_TAG}" record, got "{tag}"')
        super().read(reader)
        self._read_int_fields(reader, _MAPS)

    def resize(self, local: int, total: int, ghost: int) -> None:
        """Resize the entity arrays and the connectivity maps."""
        super().resize(local, total, ghost)
        self._resize_int_fields(_MAPS, total)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Corners):
            return NotImplemented
        return super().__eq__(other) and self._int_fields_equal(other, _MAPS)

    __hash__ = None  # type: ignore[assignment]


class CornerVolume(EntityField):
    """Corner volume: half of each adjacent real side's volume."""

    def __init__(self, corners: Corners) -> None:
        super().__init__(DSType.DBLV, corners)

    def compute(self) -> None:
        corners = self.entity()
        sides: Any = getattr(self.mesh(), "sides")
        s2c1 = self.caccess("m:s>c1")
        s2c2 = self.caccess("m:s>c2")
        side_vol = self.caccess("side_vol")

        volumes = [0.0] * corners.size()
        for s, flag in enumerate(sides.mask[: sides.local_size()]):
            if flag > 0:
                half = 0.5 * side_vol[s]
                volumes[s2c1[s]] += half
                volumes[s2c2[s]] += half
        self.data = volumes
        corners.scatter(volumes)


class CornerCsurf(EntityField):
    """Sum of the area-weighted normals of the facets bounding each corner."""

    def __init__(self, corners: Corners) -> None:
        super().__init__(DSType.VEC3V, corners)

    def compute(self) -> None:
        corners = self.entity()
        sides: Any = getattr(self.mesh(), "sides")
        s2c1 = self.caccess("m:s>c1")
        s2c2 = self.caccess("m:s>c2")
        side_surf = self.caccess("side_surf")

        csurf = [Vec3() for _ in range(corners.size())]
        for s, flag in enumerate(sides.mask[: sides.local_size()]):
            if flag:
                csurf[s2c1[s]] += side_surf[s]
                csurf[s2c2[s]] -= side_surf[s]
        self.data = csurf


class CornerToSides(EntityField):
    """Inverse connectivity: the sides touching each corner."""

    def __init__(self, corners: Corners) -> None:
        super().__init__(DSType.INTRR, corners)

    def compute(self) -> None:
        corners = self.entity()
        sides: Any = getattr(self.mesh(), "sides")
        cll = corners.size()
        s2c1 = self.caccess("m:s>c1")
        s2c2 = self.caccess("m:s>c2")

        accum: list[list[int]] = [[] for _ in range(cll)]
        for s in range(sides.size()):
            accum[_checked(s2c1[s], cll)].append(s)
            accum[_checked(s2c2[s], cll)].append(s)

        table: RaggedRight[int] = RaggedRight(cll)
        for c, row in enumerate(accum):
            table.assign(c, row)
        self.data = table