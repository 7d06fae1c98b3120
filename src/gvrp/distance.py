"""Pairwise distances and k-nearest candidate lists over an instance's nodes."""
import logging
from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np
from scipy.spatial.distance import cdist

from .exceptions import RangeError

logger = logging.getLogger(__name__)


def _node_id(ref) -> int:
    """Accept either a node id or anything carrying an ``id`` attribute."""
    if isinstance(ref, (int, np.integer)):
        return int(ref)
    return ref.id


class DistanceMatrix:
    """Symmetric EUC_2D distance matrix addressed by 1-based node id.

    Distances follow the TSPLIB convention: the euclidean distance rounded to
    the nearest integer, so every route length is an integer as well.
    """

    def __init__(self, nodes: Sequence):
        ids = [node.id for node in nodes]
        self._index: Dict[int, int] = {node_id: i for i, node_id in enumerate(ids)}
        coords = np.array([node.position for node in nodes], dtype=float).reshape(-1, 2)
        self._matrix = np.floor(cdist(coords, coords) + 0.5).astype(np.int64)
        self._matrix.setflags(write=False)
        logger.debug(f"Built {len(ids)}x{len(ids)} distance matrix")

    def __len__(self) -> int:
        return len(self._index)

    def __call__(self, a, b) -> int:
        return self.distance(a, b)

    def _positions(self, refs) -> List[int]:
        try:
            return [self._index[_node_id(ref)] for ref in refs]
        except KeyError as exc:
            raise RangeError(f"Unknown node id {exc.args[0]}") from None

    def distance(self, a, b) -> int:
        """Distance between two nodes (or node ids)."""
        i, j = self._positions((a, b))
        return int(self._matrix[i, j])

    def route_length(self, depot, visited: Sequence) -> int:
        """Length of the closed tour depot -> visited... -> depot."""
        if not visited:
            return 0
        stops = self._positions([depot, *visited, depot])
        return int(self._matrix[stops[:-1], stops[1:]].sum())

    def submatrix(self, ids: Sequence[int]) -> np.ndarray:
        positions = self._positions(ids)
        return self._matrix[np.ix_(positions, positions)]

    def as_array(self) -> np.ndarray:
        """Read-only view, rows and columns ordered like the instance's nodes."""
        return self._matrix


class CandidateSet:
    """For every customer, the ids of its k nearest customers in other clusters.

    The depot and nodes without a cluster never appear as candidates. Ties are
    broken by ascending node id so the lists are deterministic.
    """

    def __init__(self, distances: DistanceMatrix, customers: Sequence, depot, k: int):
        self.k = k
        pool = [node for node in customers if node.id != depot.id and node.cluster_id is not None]
        self._neighbours: Dict[int, Tuple[int, ...]] = {}
        if not pool:
            return

        ids = np.array([node.id for node in pool], dtype=np.int64)
        clusters = np.array([node.cluster_id for node in pool], dtype=np.int64)
        sub = distances.submatrix(ids)
        for row, node in enumerate(pool):
            mask = clusters != node.cluster_id
            candidate_ids = ids[mask]
            # lexsort: last key is primary
            order = np.lexsort((candidate_ids, sub[row, mask]))[:k]
            self._neighbours[node.id] = tuple(int(i) for i in candidate_ids[order])

    def __len__(self) -> int:
        return len(self._neighbours)

    def __iter__(self) -> Iterator[int]:
        return iter(self._neighbours)

    def __getitem__(self, node) -> Tuple[int, ...]:
        return self._neighbours[_node_id(node)]

    def get(self, node, default: Tuple[int, ...] = ()) -> Tuple[int, ...]:
        return self._neighbours.get(_node_id(node), default)

    def items(self):
        return self._neighbours.items()

    def describe(self) -> str:
        lines = [f"candidate set (k = {self.k})"]
        for node_id, neighbours in self._neighbours.items():
            lines.append(f"C{node_id}: {', '.join(f'C{n}' for n in neighbours)}")
        return "\n".join(lines)
