#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Component Storage Backends

Defines the storage abstraction the World keeps its components in, and
the two interchangeable implementations:

DenseStore
    Records live in a flat list; the handle is the index into that list.
    Fast iteration in insertion order, no removal.

SparseStore
    Records live in a dict keyed by handle. Handles stay valid after
    other entities are removed; removal is O(1) and leaves no gaps.

Systems are written once against ComponentStore and never depend on
which backend is plugged in. Iteration order is made explicit through
`handles()`, which always returns handles in ascending order.

Usage
-----
    from hylaean.simulation.storage import get_store_class

    StoreClass = get_store_class("sparse")
    positions = StoreClass()
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Tuple, Type

from .components import EntityHandle


class ComponentInvariantError(RuntimeError):
    """Raised when the entity/component pairing invariant is broken."""


class MissingComponentError(ComponentInvariantError, LookupError):
    """Raised when a handle has no record in a store it is expected to be in."""

    def __init__(self, store_name: str, handle: EntityHandle):
        super().__init__(f"Entity {handle} has no record in the {store_name} store")
        self.store_name = store_name
        self.handle = handle


class ComponentStore(ABC):
    """
    Abstract base class for a store of one component type.

    Parameters
    ----------
    label : str
        Human readable name of the component kind held (used in errors).
    """

    # Backend name for registry - subclasses should override
    name = "abstract"
    description = "Abstract component store"

    def __init__(self, label: str = "component"):
        self.label = label

    @abstractmethod
    def attach(self, handle: EntityHandle, component: Any) -> None:
        """
        Attach a component to a handle.

        Components are attached once; attaching to a handle that already
        has a record raises ComponentInvariantError.
        """
        pass

    @abstractmethod
    def check_attach(self, handle: EntityHandle) -> None:
        """Raise ComponentInvariantError if `attach(handle, ...)` would be refused."""
        pass

    @abstractmethod
    def get(self, handle: EntityHandle) -> Any:
        """
        Look up the component for a handle.

        Raises
        ------
        MissingComponentError
            If the handle has no record in this store.
        """
        pass

    @abstractmethod
    def handles(self) -> List[EntityHandle]:
        """Snapshot of all handles with a record, in ascending order."""
        pass

    @abstractmethod
    def remove(self, handle: EntityHandle) -> None:
        """Remove the record for a handle."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    @abstractmethod
    def __contains__(self, handle: EntityHandle) -> bool:
        pass

    def items(self) -> Iterator[Tuple[EntityHandle, Any]]:
        """Iterate over (handle, component) pairs in ascending handle order."""
        for handle in self.handles():
            yield handle, self.get(handle)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(label={self.label!r}, size={len(self)})"


class DenseStore(ComponentStore):
    """
    Index-addressed store backed by a list.

    Attachment appends, so components must be attached in handle order:
    the handle of each new record is the current length of the list.
    """

    name = "dense"
    description = "Dense store: list indexed by creation ordinal, no removal"

    def __init__(self, label: str = "component"):
        super().__init__(label)
        self._records: List[Any] = []

    def check_attach(self, handle: EntityHandle) -> None:
        size = len(self._records)
        if 0 <= handle < size:
            raise ComponentInvariantError(
                f"Entity {handle} already has a {self.label} attached"
            )
        if handle != size:
            raise ComponentInvariantError(
                f"Dense {self.label} store expects handle {size}, got {handle}"
            )

    def attach(self, handle: EntityHandle, component: Any) -> None:
        self.check_attach(handle)
        self._records.append(component)

    def get(self, handle: EntityHandle) -> Any:
        if 0 <= handle < len(self._records):
            return self._records[handle]
        raise MissingComponentError(self.label, handle)

    def handles(self) -> List[EntityHandle]:
        return list(range(len(self._records)))

    def remove(self, handle: EntityHandle) -> None:
        raise ComponentInvariantError(
            f"Dense {self.label} store does not support removal; use the sparse backend"
        )

    def items(self) -> Iterator[Tuple[EntityHandle, Any]]:
        return iter(list(enumerate(self._records)))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, handle: EntityHandle) -> bool:
        return 0 <= handle < len(self._records)


class SparseStore(ComponentStore):
    """
    Key-addressed store backed by a dict.

    Handles can be attached in any order. Dict iteration order depends on
    attachment history, so `handles()` sorts before returning.
    """

    name = "sparse"
    description = "Sparse store: dict keyed by durable handle, O(1) removal"

    def __init__(self, label: str = "component"):
        super().__init__(label)
        self._records: Dict[EntityHandle, Any] = {}

    def check_attach(self, handle: EntityHandle) -> None:
        if handle in self._records:
            raise ComponentInvariantError(
                f"Entity {handle} already has a {self.label} attached"
            )

    def attach(self, handle: EntityHandle, component: Any) -> None:
        self.check_attach(handle)
        self._records[handle] = component

    def get(self, handle: EntityHandle) -> Any:
        try:
            return self._records[handle]
        except KeyError:
            raise MissingComponentError(self.label, handle) from None

    def handles(self) -> List[EntityHandle]:
        return sorted(self._records)

    def remove(self, handle: EntityHandle) -> None:
        if handle not in self._records:
            raise MissingComponentError(self.label, handle)
        del self._records[handle]

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, handle: EntityHandle) -> bool:
        return handle in self._records


# Registry mapping backend names to classes
STORE_REGISTRY: Dict[str, Type[ComponentStore]] = {
    "dense": DenseStore,
    "sparse": SparseStore,
}

DEFAULT_STORE = "dense"


def get_store_class(name: str) -> Type[ComponentStore]:
    """
    Get a storage backend class by name.

    Parameters
    ----------
    name : str
        Backend name (e.g., "dense", "sparse").

    Returns
    -------
    Type[ComponentStore]
        The store class.

    Raises
    ------
    ValueError
        If the backend name is not found in the registry.
    """
    if name not in STORE_REGISTRY:
        available = ", ".join(STORE_REGISTRY.keys())
        raise ValueError(
            f"Unknown storage backend: '{name}'. Available backends: {available}"
        )
    return STORE_REGISTRY[name]


def list_stores() -> Dict[str, str]:
    """Mapping of backend names to descriptions."""
    return {name: cls.description for name, cls in STORE_REGISTRY.items()}


def register_store(name: str, store_class: Type[ComponentStore]) -> None:
    """
    Register a new storage backend.

    Raises
    ------
    TypeError
        If store_class is not a subclass of ComponentStore.
    """
    if not (isinstance(store_class, type) and issubclass(store_class, ComponentStore)):
        raise TypeError(
            f"Store class must be a subclass of ComponentStore, got {store_class}"
        )
    STORE_REGISTRY[name] = store_class
