"""Binary serialization helpers, string trimming and debugging support."""

from __future__ import annotations

import enum
import os
import struct
import sys
import time
from collections.abc import Iterable, Sequence
from typing import BinaryIO

from ume.vecn import Vec3

_WHITESPACE = " \n\r\t\f\v"


class ElementKind(enum.Enum):
    """Scalar element kinds in the binary format, by struct code."""

    INT = "i"
    SHORT = "h"
    SIZE = "Q"
    DOUBLE = "d"

    @property
    def itemsize(self) -> int:
        return struct.calcsize("<" + self.value)


class BinaryWriter:
    """Writes values in the mesh binary format to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream

    def _pack(self, fmt: str, *values: float) -> None:
        self.stream.write(struct.pack("<" + fmt, *values))

    def write_size(self, value: int) -> None:
        """Write an unsigned 64-bit length."""
        self._pack("Q", value)

    def write_int(self, value: int) -> None:
        """Write a signed 32-bit integer."""
        self._pack("i", value)

    def write_string(self, text: str) -> None:
        """Write a length-prefixed string."""
        raw = text.encode("utf-8")
        self.write_size(len(raw))
        self.stream.write(raw)

    def write_array(self, values: Sequence[float], kind: ElementKind) -> None:
        """Write a length-prefixed array of scalars, followed by a newline."""
        self.write_size(len(values))
        if values:
            self._pack(f"{len(values)}{kind.value}", *values)
        self.end_line()

    def write_vec3_array(self, values: Sequence[Vec3]) -> None:
        """Write a length-prefixed array of Vec3, followed by a newline."""
        self.write_size(len(values))
        if values:
            flat = [component for vec in values for component in vec]
            self._pack(f"{len(flat)}d", *flat)
        self.end_line()

    def end_line(self) -> None:
        """Write a record-separating newline."""
        self.stream.write(b"\n")


class BinaryReader:
    """Reads values in the mesh binary format from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream

    def _read_exact(self, count: int) -> bytes:
        data = self.stream.read(count)
        if len(data) != count:
            raise EOFError(f"expected {count} bytes, got {len(data)}")
        return data

    def _unpack(self, fmt: str) -> tuple:
        fmt = "<" + fmt
        return struct.unpack(fmt, self._read_exact(struct.calcsize(fmt)))

    def read_size(self) -> int:
        """Read an unsigned 64-bit length."""
        return self._unpack("Q")[0]

    def read_int(self) -> int:
        """Read a signed 32-bit integer."""
        return self._unpack("i")[0]

    def read_string(self) -> str:
        """Read a length-prefixed string."""
        length = self.read_size()
        return self._read_exact(length).decode("utf-8") if length else ""

    def read_array(self, kind: ElementKind) -> list:
        """Read a length-prefixed scalar array and its trailing newline."""
        length = self.read_size()
        values = list(self._unpack(f"{length}{kind.value}")) if length else []
        self.skip_line()
        return values

    def read_vec3_array(self) -> list[Vec3]:
        """Read a length-prefixed Vec3 array and its trailing newline."""
        length = self.read_size()
        flat = self._unpack(f"{3 * length}d") if length else ()
        values = [Vec3(*flat[i:i + 3]) for i in range(0, len(flat), 3)]
        self.skip_line()
        return values

    def skip_line(self) -> None:
        """Discard bytes up to and including the next newline, or to EOF."""
        while True:
            byte = self.stream.read(1)
            if not byte or byte == b"\n":
                return


def ltrim(text: str) -> str:
    """Remove leading whitespace."""
    return text.lstrip(_WHITESPACE)


def rtrim(text: str) -> str:
    """Remove trailing whitespace."""
    return text.rstrip(_WHITESPACE)


def trim(text: str) -> str:
    """Remove leading and trailing whitespace."""
    return rtrim(ltrim(text))


def _chunks(values: Iterable[float], size: int) -> list[list[float]]:
    items = list(values)
    return [items[i:i + size] for i in range(0, len(items), size)]


def debug_attach_point(mype: int) -> None:
    """Pause this rank if UME_DEBUG_RANK names it, so a debugger can attach.

    A debugger releases the pause by setting the local ``release`` to true.
    """
    value = os.environ.get("UME_DEBUG_RANK")
    if value is None:
        return
    stoppe = int(value, 10)
    if stoppe != mype:
        return
    sys.stderr.write(
        f"Execution is paused on rank {stoppe} PID {os.getpid()} because the "
        "environment variable\nUME_DEBUG_RANK is set. Attach a debugger, go "
        "up to the debug_attach_point frame, and set\n`release = True`\n\n"
    )
    sys.stderr.flush()
    release = False
    while not release:
        time.sleep(5)