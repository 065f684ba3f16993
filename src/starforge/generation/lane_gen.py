import logging
import math
import random
from typing import Dict, Iterable, List, Sequence, Set, Tuple

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components
from scipy.spatial.distance import pdist

from ..core.ids import LaneId, StarId, new_id
from .model import Star, HyperspaceLane

logger = logging.getLogger(__name__)

MAX_HYPERLANE_DISTANCE = 200.0
EXTRA_CONNECTIONS_FACTOR = 0.3

Edge = Tuple[int, int, float]


class DisjointSetUnion:
    """A Disjoint Set Union (DSU) data structure for Kruskal's algorithm."""
    def __init__(self, n: int):
        self.parent = list(range(n))
        self.rank = [0] * n

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        # Path compression
        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]
        return root

    def union(self, i: int, j: int) -> bool:
        root_i = self.find(i)
        root_j = self.find(j)
        if root_i == root_j:
            return False
        if self.rank[root_i] < self.rank[root_j]:
            self.parent[root_i] = root_j
        elif self.rank[root_i] > self.rank[root_j]:
            self.parent[root_j] = root_i
        else:
            self.parent[root_j] = root_i
            self.rank[root_i] += 1
        return True


def star_coordinates(stars: Sequence[Star]) -> np.ndarray:
    """Returns an (n, 2) array of star positions in list order."""
    return np.array([[star.position.x, star.position.y] for star in stars], dtype=float).reshape(-1, 2)


def sorted_star_edges(stars: Sequence[Star]) -> List[Edge]:
    """
    Every unordered star pair as (i, j, distance) with i < j, shortest first.

    Equal distances keep their (i, j) enumeration order.
    """
    n = len(stars)
    if n < 2:
        return []
    distances = pdist(star_coordinates(stars))
    rows, cols = np.triu_indices(n, k=1) # Same pair order as pdist's condensed output
    order = np.argsort(distances, kind="stable")
    return [(int(rows[k]), int(cols[k]), float(distances[k])) for k in order]


def minimum_spanning_edges(n: int, sorted_edges: Iterable[Edge]) -> List[Edge]:
    """Kruskal's algorithm over edges already sorted by distance."""
    dsu = DisjointSetUnion(n)
    mst_edges: List[Edge] = []
    for i, j, dist in sorted_edges:
        if dsu.union(i, j):
            mst_edges.append((i, j, dist))
            if len(mst_edges) == n - 1:
                break
    return mst_edges


def extra_local_edges(sorted_edges: Iterable[Edge], used: Set[Tuple[int, int]], max_distance: float, limit: int) -> List[Edge]:
    """Shortest edges within max_distance that are not used yet, at most limit of them."""
    extras: List[Edge] = []
    if limit <= 0:
        return extras
    for i, j, dist in sorted_edges:
        if dist > max_distance:
            break
        if (i, j) in used:
            continue
        extras.append((i, j, dist))
        used.add((i, j))
        if len(extras) >= limit:
            break
    return extras


def generate_hyperspace_lanes(
    stars: Sequence[Star],
    rng: random.Random,
    max_lane_distance: float = MAX_HYPERLANE_DISTANCE,
    extra_connections_factor: float = EXTRA_CONNECTIONS_FACTOR,
) -> List[HyperspaceLane]:
    """
    Connects every star with a minimum spanning tree, then adds short local lanes.

    Args:
        stars: All stars of the galaxy.
        rng: Random source used for lane ids.
        max_lane_distance: Longest lane that may be added on top of the spanning tree.
        extra_connections_factor: Extra lanes allowed, as a fraction of the tree's edge count.

    Returns:
        Undirected lanes; the tree edges come first, then the extras, each group shortest first.
    """
    if len(stars) < 2:
        return []

    edges = sorted_star_edges(stars)
    mst_edges = minimum_spanning_edges(len(stars), edges)
    used = {(i, j) for i, j, _ in mst_edges}

    extra_limit = math.floor(len(mst_edges) * extra_connections_factor)
    extras = extra_local_edges(edges, used, max_lane_distance, extra_limit)
    logger.debug("Lane graph: %d tree lanes, %d extra lanes (limit %d)", len(mst_edges), len(extras), extra_limit)

    return [
        HyperspaceLane(
            id=LaneId(new_id(rng)),
            from_star_id=stars[i].id,
            to_star_id=stars[j].id,
            distance=dist,
        )
        for i, j, dist in mst_edges + extras
    ]


def count_components(star_ids: Sequence[StarId], lanes: Iterable[HyperspaceLane]) -> int:
    """Number of connected components of the lane graph over the given stars."""
    n = len(star_ids)
    if n == 0:
        return 0
    index: Dict[StarId, int] = {star_id: idx for idx, star_id in enumerate(star_ids)}
    rows, cols = [], []
    for lane in lanes:
        if lane.from_star_id in index and lane.to_star_id in index:
            rows.append(index[lane.from_star_id])
            cols.append(index[lane.to_star_id])
    graph = coo_matrix(
        (np.ones(len(rows)), (np.array(rows, dtype=np.int64), np.array(cols, dtype=np.int64))),
        shape=(n, n),
    )
    n_components, _ = connected_components(graph, directed=False)
    return int(n_components)


def is_connected(stars: Sequence[Star], lanes: Iterable[HyperspaceLane]) -> bool:
    return count_components([star.id for star in stars], lanes) <= 1
