#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Physics Systems

Per-tick systems that operate on a World:

gravity_system
    Integrates the central-body acceleration into every velocity.
propagation_system
    Advances every position by its velocity.

Run gravity before propagation within a tick: updating velocities first
and positions second is what makes the scheme semi-implicit (symplectic)
Euler.

Both systems can fan out across a thread pool. Work is partitioned into
contiguous ranges of the handle snapshot; each entity's position and
velocity are touched by exactly one worker, so no locking is needed.
Every phase waits for all of its futures before returning, which is the
barrier between phases.
"""

import math
from concurrent.futures import Executor
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from .world import World

T = TypeVar("T")


def partition_range(n: int, parts: int) -> List[Tuple[int, int]]:
    """
    Split range(n) into at most `parts` contiguous, near-equal slices.

    Returns
    -------
    list
        (start, stop) pairs covering 0..n with no overlap. Empty slices
        are omitted.
    """
    parts = max(1, min(parts, n))
    base, extra = divmod(n, parts)
    bounds = []
    start = 0
    for k in range(parts):
        stop = start + base + (1 if k < extra else 0)
        if stop > start:
            bounds.append((start, stop))
        start = stop
    return bounds


def run_partitioned(
    work: Callable[[int, int], T],
    bounds: Sequence[Tuple[int, int]],
    executor: Optional[Executor] = None,
) -> List[T]:
    """
    Run `work(start, stop)` for every slice and wait for all of them.

    Results come back in slice order. Without an executor, or with a
    single slice, the work runs inline on the calling thread. Exceptions
    raised by a worker propagate to the caller.
    """
    if executor is None or len(bounds) <= 1:
        return [work(start, stop) for start, stop in bounds]
    futures = [executor.submit(work, start, stop) for start, stop in bounds]
    return [future.result() for future in futures]


def gravity_system(
    world: World,
    dt: float,
    gravitational_parameter: float,
    executor: Optional[Executor] = None,
    num_workers: int = 1,
) -> None:
    """
    Apply central gravity to every entity's velocity for one step.

    Uses forward Euler: v += a * dt, where a = -mu * r / |r|^3.
    Entities sitting exactly on the central body (|r| == 0) are skipped.

    Parameters
    ----------
    world : World
        World to update in place.
    dt : float
        Time step (s).
    gravitational_parameter : float
        mu of the central body (m^3/s^2).
    executor : Executor, optional
        Thread pool to fan out on.
    num_workers : int
        Number of slices to split the entities into.

    Raises
    ------
    MissingComponentError
        If an entity with a position has no velocity.
    """
    handles = world.handles()
    positions = world.positions
    velocities = world.velocities

    def integrate(start: int, stop: int) -> None:
        for handle in handles[start:stop]:
            pos = positions.get(handle)
            vel = velocities.get(handle)
            r = math.sqrt(pos.x * pos.x + pos.y * pos.y + pos.z * pos.z)
            if r > 0.0:
                accel_factor = -gravitational_parameter / (r * r * r)
                vel.dx += accel_factor * pos.x * dt
                vel.dy += accel_factor * pos.y * dt
                vel.dz += accel_factor * pos.z * dt

    run_partitioned(integrate, partition_range(len(handles), num_workers), executor)


def propagation_system(
    world: World,
    dt: float,
    executor: Optional[Executor] = None,
    num_workers: int = 1,
) -> None:
    """
    Advance every entity's position by its velocity: p += v * dt.

    Must run after gravity_system has finished for the current tick.

    Raises
    ------
    MissingComponentError
        If an entity with a position has no velocity.
    """
    handles = world.handles()
    positions = world.positions
    velocities = world.velocities

    def advance(start: int, stop: int) -> None:
        for handle in handles[start:stop]:
            pos = positions.get(handle)
            vel = velocities.get(handle)
            pos.x += vel.dx * dt
            pos.y += vel.dy * dt
            pos.z += vel.dz * dt

    run_partitioned(advance, partition_range(len(handles), num_workers), executor)

