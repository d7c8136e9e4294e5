"""Small fixed-length mathematical vectors."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from functools import total_ordering
from numbers import Real
from typing import Any, Union

Number = Union[int, float]


@total_ordering
class VecN:
    """A mutable mathematical vector of arithmetic values."""

    __slots__ = ("_data",)

    def __init__(self, values: Iterable[Number]) -> None:
        self._data = list(values)

    @classmethod
    def _make(cls, values: Iterable[Number]) -> "VecN":
        obj = cls.__new__(cls)
        obj._data = list(values)
        return obj

    @classmethod
    def filled(cls, value: Number, size: int) -> "VecN":
        """Return a vector of ``size`` elements, all equal to ``value``."""
        return cls._make([value] * size)

    def __getitem__(self, index: int) -> Number:
        return self._data[index]

    def __setitem__(self, index: int, value: Number) -> None:
        self._data[index] = value

    def __iter__(self) -> Iterator[Number]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, VecN):
            return self._data == other._data
        if isinstance(other, Real):
            return all(v == other for v in self._data)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, VecN):
            return self._data < other._data
        return NotImplemented

    def _operand(self, other: Any) -> list[Number] | None:
        if isinstance(other, VecN):
            if len(other) != len(self):
                raise ValueError(
                    f"vector length mismatch: {len(self)} and {len(other)}"
                )
            return other._data
        if isinstance(other, Real):
            return [other] * len(self._data)
        return None

    def __add__(self, other: Any) -> "VecN":
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._make(a + b for a, b in zip(self._data, rhs))

    def __iadd__(self, other: Any) -> "VecN":
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        self._data = [a + b for a, b in zip(self._data, rhs)]
        return self

    def __sub__(self, other: Any) -> "VecN":
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._make(a - b for a, b in zip(self._data, rhs))

    def __isub__(self, other: Any) -> "VecN":
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        self._data = [a - b for a, b in zip(self._data, rhs)]
        return self

    def __mul__(self, other: Any) -> "VecN":
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._make(a * b for a, b in zip(self._data, rhs))

    def __imul__(self, other: Any) -> "VecN":
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        self._data = [a * b for a, b in zip(self._data, rhs)]
        return self

    def __truediv__(self, other: Any) -> "VecN":
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._make(a / b for a, b in zip(self._data, rhs))

    def __itruediv__(self, other: Any) -> "VecN":
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        self._data = [a / b for a, b in zip(self._data, rhs)]
        return self

    def fill(self, value: Number) -> None:
        """Set every element to ``value``."""
        self._data = [value] * len(self._data)

    def copy(self) -> "VecN":
        """Return an independent copy of this vector."""
        return self._make(self._data)

    def __str__(self) -> str:
        return "<" + ", ".join(format(v, "g") for v in self._data) + ">"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class Vec3(VecN):
    """A three-component vector of floats."""

    __slots__ = ()

    def __init__(self, x: Number = 0.0, y: Number = 0.0, z: Number = 0.0) -> None:
        super().__init__((x, y, z))

    @classmethod
    def filled(cls, value: Number) -> "Vec3":  # type: ignore[override]
        """Return a Vec3 with all three components equal to ``value``."""
        return cls(value, value, value)

    def __repr__(self) -> str:
        x, y, z = self._data
        return f"Vec3({x!r}, {y!r}, {z!r})"


def crossprod(a: VecN, b: VecN) -> Vec3:
    """Cross product of two three-component vectors."""
    return Vec3(
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def dotprod(a: VecN, b: VecN) -> float:
    """Dot product of two three-component vectors."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def normalize(a: VecN) -> None:
    """Scale ``a`` in place to unit length."""
    a /= math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def vectormag(a: VecN) -> float:
    """Euclidean length of a three-component vector."""
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])