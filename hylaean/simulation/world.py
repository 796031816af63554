#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
World: Entity Registry and Component Stores

The World allocates entity handles and owns exactly one Position store
and one Velocity store, both of the same backend.
"""

from typing import List, Optional, Type, Union

import numpy as np

from .components import EntityHandle, Position, Velocity
from .storage import (
    ComponentStore,
    DEFAULT_STORE,
    MissingComponentError,
    get_store_class,
)


class World:
    """
    Container for all satellites in a simulation.

    Every handle must have both a Position and a Velocity before any
    system runs; a handle with only one of them is a setup-time transient.

    Parameters
    ----------
    storage : str or type
        Backend name from the store registry, or a ComponentStore subclass.

    Attributes
    ----------
    positions : ComponentStore
        Position records keyed by handle.
    velocities : ComponentStore
        Velocity records keyed by handle.
    """

    def __init__(self, storage: Union[str, Type[ComponentStore]] = DEFAULT_STORE):
        if isinstance(storage, str):
            store_class = get_store_class(storage)
        else:
            store_class = storage
        self.storage = store_class.name
        self.positions: ComponentStore = store_class("position")
        self.velocities: ComponentStore = store_class("velocity")
        self._next_handle: EntityHandle = 0

    def create_entity(self) -> EntityHandle:
        """
        Allocate a new entity handle.

        Handles come from a monotonically increasing counter and are never
        reused, which makes them dense ordinals as long as nothing is removed.
        """
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def attach_position(self, handle: EntityHandle, position: Position) -> None:
        self._check_allocated(handle)
        self.positions.attach(handle, position)

    def attach_velocity(self, handle: EntityHandle, velocity: Velocity) -> None:
        self._check_allocated(handle)
        self.velocities.attach(handle, velocity)

    def add_entity(self, position: Position, velocity: Velocity) -> EntityHandle:
        """
        Create an entity with both components already known.

        Both stores are checked before anything is attached, so a refused
        attachment leaves the world and the handle counter unchanged.
        """
        handle = self._next_handle
        self.positions.check_attach(handle)
        self.velocities.check_attach(handle)

        self.create_entity()
        self.positions.attach(handle, position)
        self.velocities.attach(handle, velocity)
        return handle

    def remove_entity(self, handle: EntityHandle) -> None:
        """
        Remove an entity and both of its components.

        Only backends with removal support (sparse) accept this; the dense
        backend raises ComponentInvariantError. A handle missing from either
        store raises MissingComponentError and nothing is removed.
        """
        for store in (self.positions, self.velocities):
            if handle not in store:
                raise MissingComponentError(store.label, handle)
        self.positions.remove(handle)
        self.velocities.remove(handle)

    def handles(self) -> List[EntityHandle]:
        """Ascending snapshot of all handles that have a position."""
        return self.positions.handles()

    def position_array(self, handles: Optional[List[EntityHandle]] = None) -> np.ndarray:
        """
        Positions as an (n, 3) array, rows ordered like `handles`.

        Parameters
        ----------
        handles : list, optional
            Handle snapshot to gather. Defaults to `self.handles()`.
        """
        if handles is None:
            handles = self.handles()
        out = np.empty((len(handles), 3))
        for row, handle in enumerate(handles):
            pos = self.positions.get(handle)
            out[row, 0] = pos.x
            out[row, 1] = pos.y
            out[row, 2] = pos.z
        return out

    def velocity_array(self, handles: Optional[List[EntityHandle]] = None) -> np.ndarray:
        """Velocities as an (n, 3) array, rows ordered like `handles`."""
        if handles is None:
            handles = self.handles()
        out = np.empty((len(handles), 3))
        for row, handle in enumerate(handles):
            vel = self.velocities.get(handle)
            out[row, 0] = vel.dx
            out[row, 1] = vel.dy
            out[row, 2] = vel.dz
        return out

    def _check_allocated(self, handle: EntityHandle) -> None:
        if not 0 <= handle < self._next_handle:
            raise ValueError(f"Entity handle {handle} was never created by this world")

    def __len__(self) -> int:
        return len(self.positions)

    def __repr__(self) -> str:
        return (
            f"World(storage={self.storage}, positions={len(self.positions)}, "
            f"velocities={len(self.velocities)})"
        )
