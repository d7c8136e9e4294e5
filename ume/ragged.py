"""An array of variable-length arrays stored in one flat list."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class RaggedRight(Generic[T]):
    """Rows of differing lengths; row ``n`` is ``data[bidx[n]:eidx[n]]``."""

    def __init__(self, base_size: int = 0) -> None:
        self._bidx: list[int] = []
        self._eidx: list[int] = []
        self._data: list[T] = []
        self.reset(base_size)

    def reset(self, length: int) -> None:
        """Set the number of rows to ``length``, all empty."""
        self._bidx = [0] * length
        self._eidx = [0] * length

    def _check(self, n: int) -> None:
        if not 0 <= n < len(self._bidx):
            raise IndexError(f"row {n} out of range for {len(self._bidx)} rows")

    def assign(self, n: int, values: Iterable[T]) -> None:
        """Store ``values`` as row ``n``; earlier contents stay unreferenced."""
        self._check(n)
        self._bidx[n] = len(self._data)
        self._data.extend(values)
        self._eidx[n] = len(self._data)

    def size(self, n: int) -> int:
        """Return the length of row ``n``."""
        self._check(n)
        return self._eidx[n] - self._bidx[n]

    def __getitem__(self, n: int) -> list[T]:
        self._check(n)
        return self._data[self._bidx[n]:self._eidx[n]]

    def __len__(self) -> int:
        return len(self._bidx)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RaggedRight):
            return NotImplemented
        return (
            self._bidx == other._bidx
            and self._eidx == other._eidx
            and self._data == other._data
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RaggedRight({[self[n] for n in range(len(self))]!r})"