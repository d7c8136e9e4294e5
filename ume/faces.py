"""Mesh faces: entities separating zones."""

from __future__ import annotations

from typing import Any

from ume.datastore import DSEntry
from ume.ds_types import DSType
from ume.entity import Entity, EntityField, MeshBase
from ume.utils import BinaryReader, BinaryWriter
from ume.vecn import Vec3

_TAG = "faces"
_MAPS = ("m:f>z1", "m:f>z2")


def _checked(index: int, length: int) -> int:
    if not 0 <= index < length:
        raise IndexError(f"index {index} out of range for length {length}")
    return index


class Faces(Entity):
    """Mesh faces, with face-to-adjacent-zone connectivity."""

    def __init__(self, mesh: MeshBase) -> None:
        super().__init__(mesh)
        ds = self.ds()
        for name in _MAPS:
            ds.insert(name, DSEntry(DSType.INTV))
        ds.insert("fcoord", FaceCoord(self))

    def write(self, writer: BinaryWriter) -> None:
        """Write the faces in the binary mesh format."""
        writer.write_string(_TAG)
        super().write(writer)
        self._write_int_fields(writer, _MAPS)

    def read(self, reader: BinaryReader) -> None:
        """Read faces written by :meth:`write`."""
        tag = reader.read_string()
        if tag != _TAG:
            raise ValueError(f'expected "{_TAG}" record, got "{tag}"')
        super().read(reader)
        self._read_int_fields(reader, _MAPS)

    def resize(self, local: int, total: int, ghost: int) -> None:
        """Resize the entity arrays and the zone maps."""
        super().resize(local, total, ghost)
        self._resize_int_fields(_MAPS, total)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Faces):
            return NotImplemented
        return super().__eq__(other) and self._int_fields_equal(other, _MAPS)

    __hash__ = None  # type: ignore[assignment]


class FaceCoord(EntityField):
    """Face centers: the mean of the first points of each face's sides."""

    def __init__(self, faces: Faces) -> None:
        super().__init__(DSType.VEC3V, faces)

    def compute(self) -> None:
        faces = self.entity()
        sides: Any = getattr(self.mesh(), "sides")
        fl = faces.local_size()
        s2f = self.caccess("m:s>f")
        s2p1 = self.caccess("m:s>p1")
        pcoord = self.caccess("pcoord")

        coords = [Vec3() for _ in range(faces.size())]
        counts = [0] * fl
        for s, flag in enumerate(sides.mask[: sides.local_size()]):
            if flag:
                f = _checked(s2f[s], fl)
                coords[f] += pcoord[s2p1[s]]
                counts[f] += 1

        for f, flag in enumerate(faces.mask[:fl]):
            if flag:
                coords[f] /= float(counts[f])
        self.data = coords