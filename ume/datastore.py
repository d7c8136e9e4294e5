"""A hierarchical key-value store for mesh variables."""

from __future__ import annotations

import enum
from typing import Any

from ume.ds_types import DSType, default_value


class InitState(enum.Enum):
    """Initialization states of a datastore entry."""

    UNINITIALIZED = enum.auto()
    IN_PROGRESS = enum.auto()
    INITIALIZED = enum.auto()


class DSEntry:
    """A typed value held in a Datastore, with initialization metadata.

    Subclasses that compute their value on first use override
    :meth:`initialize`.
    """

    def __init__(self, dstype: DSType = DSType.NONE) -> None:
        self.dstype = DSType.NONE
        self.data: Any = None
        self.dirty = False
        self.init_state = InitState.UNINITIALIZED
        self.set_type(dstype)

    def set_type(self, dstype: DSType) -> None:
        """Set the kind of value held and reset the value to its default."""
        self.dstype = dstype
        self.data = default_value(dstype)

    def initialize(self) -> bool:
        """Bring the entry to the initialized state.

        Returns True if a computation was performed; the plain entry never
        computes anything.
        """
        self.init_state = InitState.INITIALIZED
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.dstype.name}, {self.data!r})"


class Datastore:
    """A tree of named entries; lookups search upward toward the root."""

    def __init__(self, name: str, parent: "Datastore | None" = None) -> None:
        self._name = name
        self._entries: dict[str, DSEntry] = {}
        self.parent = parent
        self.children: list[Datastore] = []
        if parent is not None:
            parent.children.append(self)

    @classmethod
    def create_root(cls) -> "Datastore":
        """Create a new root datastore named ``root``."""
        return cls("root")

    @staticmethod
    def create_child(parent: "Datastore", name: str) -> "Datastore":
        """Create a datastore named ``name`` under ``parent``."""
        return type(parent)(name, parent)

    @property
    def name(self) -> str:
        """The name of this datastore."""
        return self._name

    @property
    def path(self) -> str:
        """The chain of names from the root down to this datastore."""
        if self.parent is not None:
            return f"{self.parent.path}/{self._name}"
        return f"/{self._name}"

    def insert(self, name: str, entry: DSEntry) -> bool:
        """Add a named entry; return False if the name is already present."""
        if name in self._entries:
            return False
        self._entries[name] = entry
        return True

    def find(self, name: str) -> DSEntry | None:
        """Find an entry here or in an ancestor, or return None."""
        store: Datastore | None = self
        while store is not None:
            entry = store._entries.get(name)
            if entry is not None:
                return entry
            store = store.parent
        return None

    def _find_or_die(self, name: str) -> DSEntry:
        entry = self.find(name)
        if entry is None:
            raise KeyError(f'unable to find datastore variable named "{name}"')
        return entry

    @staticmethod
    def _value(entry: DSEntry, name: str, dstype: DSType) -> Any:
        if entry.dstype is not dstype:
            raise TypeError(
                f'datastore variable "{name}" holds {entry.dstype.name}, '
                f"not {dstype.name}"
            )
        return entry.data

    def access(self, name: str, dstype: DSType) -> Any:
        """Return the value of ``name`` for modification, marking it dirty."""
        entry = self._find_or_die(name)
        entry.initialize()
        entry.dirty = True
        return self._value(entry, name, dstype)

    def caccess(self, name: str, dstype: DSType) -> Any:
        """Return the value of ``name`` for reading."""
        entry = self._find_or_die(name)
        entry.dirty = entry.initialize()
        return self._value(entry, name, dstype)

    def assign(self, name: str, value: Any) -> None:
        """Replace the value of ``name``, marking it dirty."""
        entry = self._find_or_die(name)
        entry.initialize()
        entry.dirty = True
        entry.data = value

    def __repr__(self) -> str:
        return f"Datastore({self.path!r})"