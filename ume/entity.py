"""Mesh entities, their parallel connectivity, and fields computed on them."""

from __future__ import annotations

import abc
import dataclasses
import enum
from collections.abc import Iterable, MutableSequence, Sequence
from typing import Any

from ume.comm import (
    Buffers,
    Neighbor,
    Op,
    Transport,
    read_neighbors,
    write_neighbors,
)
from ume.datastore import Datastore, DSEntry, InitState
from ume.ds_types import DSType
from ume.utils import BinaryReader, BinaryWriter, ElementKind
from ume.vecn import VecN


class MeshBase:
    """What every mesh has: a root datastore and an optional transport."""

    def __init__(self) -> None:
        self.ds: Datastore = Datastore.create_root()
        self.comm: Transport | None = None


class CommType(enum.IntEnum):
    """Communication role of an entity element."""

    INTERNAL = 1
    SOURCE = 2
    COPY = 3
    GHOST = 4


@dataclasses.dataclass(eq=False)
class Subset:
    """A named subset of an entity's elements."""

    name: str = ""
    lsize: int = 0
    elements: list[int] = dataclasses.field(default_factory=list)
    mask: list[int] = dataclasses.field(default_factory=list)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Subset):
            return NotImplemented
        return (
            self.name == other.name
            and self.elements == other.elements
            and self.mask == other.mask
        )

    __hash__ = None  # type: ignore[assignment]


def write_subsets(writer: BinaryWriter, subsets: Sequence[Subset]) -> None:
    """Write a list of subsets in the binary mesh format."""
    writer.write_size(len(subsets))
    for subset in subsets:
        writer.write_string(subset.name)
        writer.write_int(subset.lsize)
        writer.write_array(subset.elements, ElementKind.INT)
        writer.write_array(subset.mask, ElementKind.SHORT)
        writer.end_line()
    writer.end_line()


def read_subsets(reader: BinaryReader) -> list[Subset]:
    """Read a list of subsets written by :func:`write_subsets`."""
    count = reader.read_size()
    subsets = []
    for _ in range(count):
        name = reader.read_string()
        lsize = reader.read_int()
        elements = reader.read_array(ElementKind.INT)
        mask = reader.read_array(ElementKind.SHORT)
        reader.skip_line()
        subsets.append(Subset(name, lsize, elements, mask))
    reader.skip_line()
    return subsets


def _resize(values: MutableSequence[Any], size: int, fill: Any = 0) -> None:
    """Resize ``values`` in place, keeping existing elements."""
    if len(values) > size:
        del values[size:]
    else:
        values.extend([fill] * (size - len(values)))


class Entity:
    """Information common to every kind of mesh entity.

    Ghost elements occupy the index range ``[local_size(), size())``.
    """

    def __init__(self, mesh: MeshBase) -> None:
        self._mesh = mesh
        self._lsize = 0
        self.mask: list[int] = []
        self.comm_type: list[int] = []
        self.cpy_idx: list[int] = []
        self.src_pe: list[int] = []
        self.src_idx: list[int] = []
        self.ghost_mask: list[int] = []
        self.my_cpys: list[Neighbor] = []
        self.my_srcs: list[Neighbor] = []
        self.subsets: list[Subset] = []

    def size(self) -> int:
        """Number of elements, ghosts included."""
        return len(self.mask)

    def local_size(self) -> int:
        """Number of local (non-ghost) elements."""
        return self._lsize

    def ds(self) -> Datastore:
        """The datastore of the owning mesh."""
        return self._mesh.ds

    def mesh(self) -> MeshBase:
        """The owning mesh."""
        return self._mesh

    def comm(self) -> Transport:
        """The transport of the owning mesh."""
        transport = self._mesh.comm
        if transport is None:
            raise RuntimeError("no transport is attached to the mesh")
        return transport

    def write(self, writer: BinaryWriter) -> None:
        """Write the common entity data."""
        writer.write_int(self._lsize)
        writer.write_array(self.mask, ElementKind.SHORT)
        writer.write_array(self.comm_type, ElementKind.INT)
        writer.write_array(self.cpy_idx, ElementKind.INT)
        writer.write_array(self.src_pe, ElementKind.INT)
        writer.write_array(self.src_idx, ElementKind.INT)
        writer.write_array(self.ghost_mask, ElementKind.INT)
        write_neighbors(writer, self.my_cpys)
        write_neighbors(writer, self.my_srcs)
        write_subsets(writer, self.subsets)
        writer.end_line()

    def read(self, reader: BinaryReader) -> None:
        """Read the common entity data written by :meth:`write`."""
        self._lsize = reader.read_int()
        self.mask = reader.read_array(ElementKind.SHORT)
        self.comm_type = reader.read_array(ElementKind.INT)
        self.cpy_idx = reader.read_array(ElementKind.INT)
        self.src_pe = reader.read_array(ElementKind.INT)
        self.src_idx = reader.read_array(ElementKind.INT)
        self.ghost_mask = reader.read_array(ElementKind.INT)
        self.my_cpys = read_neighbors(reader)
        self.my_srcs = read_neighbors(reader)
        self.subsets = read_subsets(reader)
        reader.skip_line()

    def resize(self, local: int, total: int, ghost: int) -> None:
        """Resize per-element arrays to ``total`` and ghost arrays to ``ghost``."""
        _resize(self.mask, total)
        _resize(self.comm_type, total)
        _resize(self.cpy_idx, ghost)
        _resize(self.src_pe, ghost)
        _resize(self.src_idx, ghost)
        _resize(self.ghost_mask, ghost)
        self._lsize = local

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return (
            self._lsize == other._lsize
            and self.mask == other.mask
            and self.comm_type == other.comm_type
            and self.cpy_idx == other.cpy_idx
            and self.src_pe == other.src_pe
            and self.src_idx == other.src_idx
            and self.ghost_mask == other.ghost_mask
            and self.my_cpys == other.my_cpys
            and self.my_srcs == other.my_srcs
            and self.subsets == other.subsets
        )

    __hash__ = None  # type: ignore[assignment]

    def _buffers(self, field: Sequence[Any]) -> tuple[Buffers, Buffers]:
        if len(field) != self.size():
            raise ValueError(
                f"field has {len(field)} elements, entity has {self.size()}"
            )
        width = len(field[0]) if field and isinstance(field[0], VecN) else 1
        return Buffers(self.my_cpys, width), Buffers(self.my_srcs, width)

    def gather(self, op: Op, field: MutableSequence[Any]) -> None:
        """Send local copies to their sources and combine them there with ``op``."""
        cpy_bufs, src_bufs = self._buffers(field)
        transport = self.comm()
        cpy_bufs.pack(field)
        transport.exchange(cpy_bufs, src_bufs)
        src_bufs.unpack(field, op)

    def scatter(self, field: MutableSequence[Any]) -> None:
        """Overwrite every copy with the value of its source."""
        cpy_bufs, src_bufs = self._buffers(field)
        transport = self.comm()
        src_bufs.pack(field)
        transport.exchange(src_bufs, cpy_bufs)
        cpy_bufs.unpack(field, Op.OVERWRITE)

    def gathscat(self, op: Op, field: MutableSequence[Any]) -> None:
        """Gather copies into sources with ``op``, then scatter the result back."""
        cpy_bufs, src_bufs = self._buffers(field)
        transport = self.comm()
        cpy_bufs.pack(field)
        transport.exchange(cpy_bufs, src_bufs)
        src_bufs.unpack(field, op)
        src_bufs.pack(field)
        transport.exchange(src_bufs, cpy_bufs)
        cpy_bufs.unpack(field, Op.OVERWRITE)

    # Helpers for integer connectivity maps kept in the datastore.

    def _int_field(self, name: str) -> list[int]:
        return self.ds().access(name, DSType.INTV)

    def _cint_field(self, name: str) -> list[int]:
        return self.ds().caccess(name, DSType.INTV)

    def _write_int_fields(self, writer: BinaryWriter, names: Iterable[str]) -> None:
        for name in names:
            writer.write_array(self._cint_field(name), ElementKind.INT)

    def _read_int_fields(self, reader: BinaryReader, names: Iterable[str]) -> None:
        for name in names:
            self._int_field(name)[:] = reader.read_array(ElementKind.INT)

    def _resize_int_fields(self, names: Iterable[str], size: int) -> None:
        for name in names:
            _resize(self._int_field(name), size)

    def _int_fields_equal(self, other: "Entity", names: Iterable[str]) -> bool:
        return all(
            self._cint_field(name) == other._cint_field(name) for name in names
        )


class EntityField(DSEntry, abc.ABC):
    """A datastore entry whose value is computed from an entity on first use."""

    def __init__(self, dstype: DSType, entity: Entity) -> None:
        super().__init__(dstype)
        self._entity = entity

    def initialize(self) -> bool:
        """Compute the value once; return True if it was computed now."""
        if self.init_state is InitState.INITIALIZED:
            return False
        if self.init_state is InitState.IN_PROGRESS:
            raise RuntimeError(
                f"initialization loop detected in {type(self).__name__}"
            )
        self.init_state = InitState.IN_PROGRESS
        try:
            self.compute()
        except BaseException:
            self.init_state = InitState.UNINITIALIZED
            raise
        self.init_state = InitState.INITIALIZED
        return True

    @abc.abstractmethod
    def compute(self) -> None:
        """Compute the value and store it in ``self.data``."""

    def _dstype_of(self, name: str) -> DSType:
        entry = self._entity.ds().find(name)
        if entry is None:
            raise KeyError(f'unable to find datastore variable named "{name}"')
        return entry.dstype

    def access(self, name: str) -> Any:
        """Return another datastore value for modification."""
        return self._entity.ds().access(name, self._dstype_of(name))

    def caccess(self, name: str) -> Any:
        """Return another datastore value for reading."""
        return self._entity.ds().caccess(name, self._dstype_of(name))

    def entity(self) -> Entity:
        """The entity this field lives on."""
        return self._entity

    def mesh(self) -> MeshBase:
        """The mesh of the entity this field lives on."""
        return self._entity.mesh()