"""Communication patterns, buffers and transports between mesh partitions."""

from __future__ import annotations

import abc
import enum
import sys
from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass, field
from typing import Any

from ume.utils import BinaryReader, BinaryWriter, ElementKind
from ume.vecn import Vec3, VecN

_NEIGHBORS_TAG = "neighbors"


class Op(enum.Enum):
    """How received values are combined with existing field values."""

    OVERWRITE = enum.auto()
    MAX = enum.auto()
    MIN = enum.auto()
    SUM = enum.auto()


@dataclass
class Neighbor:
    """A remote PE and the local entity indices exchanged with it."""

    pe: int
    elements: list[int] = field(default_factory=list)


def write_neighbors(writer: BinaryWriter, neighbors: Sequence[Neighbor]) -> None:
    """Write a neighbor list in the binary mesh format."""
    writer.write_string(_NEIGHBORS_TAG)
    writer.write_size(len(neighbors))
    for neighbor in neighbors:
        writer.write_int(neighbor.pe)
        writer.write_array(neighbor.elements, ElementKind.INT)
        writer.end_line()
    writer.end_line()


def read_neighbors(reader: BinaryReader) -> list[Neighbor]:
    """Read a neighbor list written by :func:`write_neighbors`."""
    tag = reader.read_string()
    if tag != _NEIGHBORS_TAG:
        raise ValueError(f'expected "{_NEIGHBORS_TAG}" record, got "{tag}"')
    count = reader.read_size()
    neighbors = []
    for _ in range(count):
        pe = reader.read_int()
        elements = reader.read_array(ElementKind.INT)
        reader.skip_line()
        neighbors.append(Neighbor(pe, elements))
    reader.skip_line()
    return neighbors


@dataclass
class Remote:
    """Where one remote PE's data sits in an aggregated buffer."""

    pe: int
    buf_offset: int
    buf_len: int


class Buffers:
    """One aggregated communication buffer spanning all neighboring PEs.

    ``width`` is the number of base scalars per field element: 1 for int and
    float fields, 3 for Vec3 fields.
    """

    def __init__(self, neighbors: Sequence[Neighbor], width: int = 1) -> None:
        if width < 1:
            raise ValueError("width must be at least 1")
        self.width = width
        self.remotes: list[Remote] = []
        self.b2e: list[int] = []
        for neighbor in neighbors:
            self.remotes.append(
                Remote(
                    pe=neighbor.pe,
                    buf_offset=len(self.b2e) * width,
                    buf_len=len(neighbor.elements) * width,
                )
            )
            self.b2e.extend(neighbor.elements)
        self.buf: list[Any] = [0] * (len(self.b2e) * width)

    def num_entries(self) -> int:
        """Total number of entities exchanged with all remotes."""
        return len(self.b2e)

    def pack(self, field: Sequence[Any]) -> None:
        """Fill the buffer from the mapped elements of ``field``."""
        if self.width == 1:
            self.buf = [field[e] for e in self.b2e]
        else:
            self.buf = [
                component for e in self.b2e for component in field[e]
            ]

    def _values(self) -> list[Any]:
        if self.width == 1:
            return list(self.buf)
        w = self.width
        chunks = (self.buf[i:i + w] for i in range(0, len(self.buf), w))
        if w == 3:
            return [Vec3(*chunk) for chunk in chunks]
        return [VecN(chunk) for chunk in chunks]

    def unpack(self, field: MutableSequence[Any], op: Op) -> None:
        """Scatter the buffer into ``field``, combining values with ``op``."""
        values = self._values()
        if op is Op.OVERWRITE:
            seen: set[int] = set()
            for e, value in zip(self.b2e, values):
                if e in seen:
                    raise ValueError(f"entry {e} overwritten more than once")
                seen.add(e)
                field[e] = value
        elif op is Op.MAX:
            for e, value in zip(self.b2e, values):
                field[e] = max(field[e], value)
        elif op is Op.MIN:
            for e, value in zip(self.b2e, values):
                field[e] = min(field[e], value)
        elif op is Op.SUM:
            for e, value in zip(self.b2e, values):
                field[e] = field[e] + value
        else:
            raise ValueError(f"unknown operation {op!r}")


class TransportAbort(RuntimeError):
    """Raised when a client aborts through a transport."""


class Transport(abc.ABC):
    """Low-level mechanism that moves buffer contents between partitions."""

    def exchange(self, sends: Buffers, recvs: Buffers) -> None:
        """Send ``sends`` to remotes and receive into ``recvs``; no-op here."""

    def id(self) -> int:
        """An identifier for this node in the transport graph."""
        return -1

    @abc.abstractmethod
    def stop(self) -> int:
        """Shut the transport down."""

    def abort(self, message: str) -> None:
        """Abort with ``message``."""
        raise TransportAbort(message)


class DummyTransport(Transport):
    """A transport that does nothing; every exchange silently fails."""

    def __init__(self) -> None:
        stars = "* WARNING " * 7 + "*"
        sys.stderr.write(
            f"\n{stars}\n"
            "\tA dummy transport mechanism was instantiated:\n"
            "\tAll communications will silently fail!\n"
            f"{stars}\n\n"
        )

    def stop(self) -> int:
        return -1