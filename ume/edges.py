"""Mesh edges: entities connecting two points."""

from __future__ import annotations

from typing import Any

from ume.datastore import DSEntry
from ume.ds_types import DSType
from ume.entity import Entity, EntityField, MeshBase
from ume.utils import BinaryReader, BinaryWriter
from ume.vecn import Vec3

_TAG = "edges"
_MAPS = ("m:e>p1", "m:e>p2")


class Edges(Entity):
    """Mesh edges, with edge-to-endpoint connectivity."""

    def __init__(self, mesh: MeshBase) -> None:
        super().__init__(mesh)
        ds = self.ds()
        for name in _MAPS:
            ds.insert(name, DSEntry(DSType.INTV))
        ds.insert("ecoord", EdgeCoord(self))

    def write(self, writer: BinaryWriter) -> None:
        """Write the edges in the binary mesh format."""
        writer.write_string(_TAG)
        super().write(writer)
        self._write_int_fields(writer, _MAPS)

    def read(self, reader: BinaryReader) -> None:
        """Read edges written by :meth:`write`."""
        tag = reader.read_string()
        if tag != _TAG:
            raise ValueError(f'expected "{_TAG}" record, got "{tag}"')
        super().read(reader)
        self._read_int_fields(reader, _MAPS)

    def resize(self, local: int, total: int, ghost: int) -> None:
        """Resize the entity arrays and the endpoint maps."""
        super().resize(local, total, ghost)
        self._resize_int_fields(_MAPS, total)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Edges):
            return NotImplemented
        return super().__eq__(other) and self._int_fields_equal(other, _MAPS)

    __hash__ = None  # type: ignore[assignment]


class EdgeCoord(EntityField):
    """Edge centers: the midpoint of each local edge's endpoints."""

    def __init__(self, edges: Edges) -> None:
        super().__init__(DSType.VEC3V, edges)

    def compute(self) -> None:
        edges = self.entity()
        e2p1 = self.caccess("m:e>p1")
        e2p2 = self.caccess("m:e>p2")
        pcoord = self.caccess("pcoord")
        coords = [Vec3() for _ in range(edges.size())]
        for e, flag in enumerate(edges.mask[: edges.local_size()]):
            if flag:
                coords[e] = (pcoord[e2p1[e]] + pcoord[e2p2[e]]) * 0.5
        self.data = coords