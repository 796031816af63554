#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Proximity Detection

Read-only pass over a World producing every unordered pair of satellites
closer than a threshold. The result is returned, never reported here.

Both detectors take one ascending snapshot of the live handles per call
and only ever pair snapshot index i with index j > i, so an entity never
pairs with itself and no pair appears twice, whichever storage backend
holds the components. Pairs come back ordered by (i, j).

pairwise
    Canonical O(n^2) scan. Rows of the outer index are split across
    workers in slices balanced by pair count; each worker owns a disjoint
    set of pairs and the slices are concatenated in order.
grid
    Uniform spatial hash with cell edge equal to the threshold. Only the
    27 neighbouring cells are scanned. Same pairs, same order.
"""

import math
from collections import defaultdict
from concurrent.futures import Executor
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .components import EntityHandle, ProximityPair
from .systems import partition_range, run_partitioned
from .world import World


def balanced_pair_partition(n: int, parts: int) -> List[Tuple[int, int]]:
    """
    Split the outer rows of an upper-triangular scan into slices of
    roughly equal pair count.

    Row i of an n-row scan covers n - 1 - i pairs, so equal-width slices
    would leave the first worker with most of the work.
    """
    if n == 0:
        return []
    parts = max(1, min(parts, n))
    cumulative = np.cumsum(np.arange(n - 1, -1, -1))
    total = int(cumulative[-1])
    if parts == 1 or total == 0:
        return [(0, n)]

    targets = total * np.arange(1, parts) / parts
    cuts = np.searchsorted(cumulative, targets, side="left") + 1
    edges = [0] + sorted({int(c) for c in cuts if 0 < c < n}) + [n]
    return [(start, stop) for start, stop in zip(edges, edges[1:]) if stop > start]


def _distances(points: np.ndarray, i: int, others: np.ndarray) -> np.ndarray:
    diff = others - points[i]
    return np.sqrt((diff * diff).sum(axis=1))


def proximity_detection_system(
    world: World,
    threshold: float,
    executor: Optional[Executor] = None,
    num_workers: int = 1,
) -> List[ProximityPair]:
    """
    Find all pairs of entities closer than `threshold`.

    Parameters
    ----------
    world : World
        World to read; never modified.
    threshold : float
        Separation (m) below which a pair is reported. Strict comparison.
    executor : Executor, optional
        Thread pool to fan the outer loop out on.
    num_workers : int
        Number of row slices.

    Returns
    -------
    list
        (handle_a, handle_b) tuples with handle_a < handle_b.
    """
    handles = world.handles()
    n = len(handles)
    if n < 2:
        return []
    points = world.position_array(handles)

    def scan(start: int, stop: int) -> List[ProximityPair]:
        pairs = []
        for i in range(start, stop):
            dist = _distances(points, i, points[i + 1:])
            for offset in np.flatnonzero(dist < threshold):
                pairs.append((handles[i], handles[i + 1 + int(offset)]))
        return pairs

    chunks = run_partitioned(scan, balanced_pair_partition(n, num_workers), executor)
    return [pair for chunk in chunks for pair in chunk]


def grid_proximity_detection_system(
    world: World,
    threshold: float,
    executor: Optional[Executor] = None,
    num_workers: int = 1,
) -> List[ProximityPair]:
    """
    Same contract as proximity_detection_system, bucketed by a uniform grid.

    Two points closer than the cell edge can only sit in the same or an
    adjacent cell, so the scan for each entity is limited to 27 cells.
    """
    handles = world.handles()
    n = len(handles)
    if n < 2 or threshold <= 0.0:
        return []
    points = world.position_array(handles)

    cells = np.floor(points / threshold).astype(np.int64)
    buckets: Dict[Tuple[int, int, int], List[int]] = defaultdict(list)
    for index, cell in enumerate(map(tuple, cells)):
        buckets[cell].append(index)

    offsets = [
        (ox, oy, oz)
        for ox in (-1, 0, 1)
        for oy in (-1, 0, 1)
        for oz in (-1, 0, 1)
    ]

    def scan(start: int, stop: int) -> List[ProximityPair]:
        pairs = []
        for i in range(start, stop):
            cx, cy, cz = (int(c) for c in cells[i])
            candidates = []
            for ox, oy, oz in offsets:
                for j in buckets.get((cx + ox, cy + oy, cz + oz), ()):
                    if j > i:
                        candidates.append(j)
            if not candidates:
                continue
            candidates.sort()
            others = np.asarray(candidates)
            dist = _distances(points, i, points[others])
            for k in np.flatnonzero(dist < threshold):
                pairs.append((handles[i], handles[int(others[k])]))
        return pairs

    chunks = run_partitioned(scan, partition_range(n, num_workers), executor)
    return [pair for chunk in chunks for pair in chunk]


# Registry mapping detector names to functions
PROXIMITY_METHODS = {
    "pairwise": proximity_detection_system,
    "grid": grid_proximity_detection_system,
}


def get_proximity_method(name: str):
    """
    Get a proximity detector by name.

    Raises
    ------
    ValueError
        If the name is not registered.
    """
    if name not in PROXIMITY_METHODS:
        available = ", ".join(PROXIMITY_METHODS.keys())
        raise ValueError(
            f"Unknown proximity method: '{name}'. Available methods: {available}"
        )
    return PROXIMITY_METHODS[name]


def flagged_handles(pairs: Iterable[ProximityPair]) -> List[EntityHandle]:
    """Sorted handles that appear in at least one pair."""
    flagged = set()
    for first, second in pairs:
        flagged.add(first)
        flagged.add(second)
    return sorted(flagged)


def minimum_separation(world: World) -> float:
    """
    Smallest distance between any two entities (m).

    Returns math.inf when the world holds fewer than two entities.
    """
    points = world.position_array()
    best = math.inf
    for i in range(len(points) - 1):
        dist = _distances(points, i, points[i + 1:])
        best = min(best, float(dist.min()))
    return best
