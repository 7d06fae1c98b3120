"""Data model for GVRP instances and the solutions evaluated against them.

Node, Cluster and Instance are frozen value types produced only by
``InstanceBuilder.build()``. Their identity is the numeric id (the name for an
Instance); every other field is excluded from equality, ordering and hashing.
Route and Solution are plain mutable records filled in by a planner.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from .distance import CandidateSet, DistanceMatrix
from .exceptions import RangeError
from .validation import is_valid, solution_cost

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Node:
    """A location of the instance. Two nodes are equal iff their ids match."""
    id: int
    position: Tuple[int, int] = field(compare=False)
    cluster_id: Optional[int] = field(default=None, compare=False)
    demand: int = field(default=0, compare=False)  # demand of the owning cluster

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    @property
    def is_assigned(self) -> bool:
        return self.cluster_id is not None

    def __str__(self) -> str:
        return f"C{self.id} = ({self.x}, {self.y})"


@dataclass(frozen=True, order=True)
class Cluster:
    """A group of interchangeable nodes sharing a single demand."""
    id: int
    demand: int = field(compare=False)
    members: FrozenSet[Node] = field(default=frozenset(), compare=False, repr=False)

    @property
    def size(self) -> int:
        return len(self.members)

    def member_ids(self) -> Tuple[int, ...]:
        return tuple(sorted(node.id for node in self.members))

    def compact(self) -> str:
        return f"S{self.id}"

    def __str__(self) -> str:
        customers = ", ".join(str(node) for node in sorted(self.members))
        return f"S{self.id} = {{ demand = {self.demand}, customers = [{customers}] }}"


@dataclass(frozen=True)
class Instance:
    """Immutable GVRP instance graph.

    ``nodes`` always contains every node, depot included, in id order.
    ``customers`` is the list routes are planned over; which nodes it holds
    depends on the depot policy used while building.

    The distance matrix and candidate set are computed once, here, from the
    finished node list.
    """
    name: str
    depot: Node = field(compare=False)
    nodes: Tuple[Node, ...] = field(compare=False, repr=False)
    clusters: Tuple[Cluster, ...] = field(compare=False, repr=False)
    fleet_size: int = field(compare=False)
    vehicle_capacity: int = field(compare=False)
    k: int = field(default=20, compare=False)
    customers: Tuple[Node, ...] = field(default=None, compare=False, repr=False)
    show_candidates: bool = field(default=False, compare=False, repr=False)
    distances: DistanceMatrix = field(init=False, compare=False, repr=False)
    candidates: CandidateSet = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        if self.customers is None:
            object.__setattr__(self, 'customers', self.nodes)

        # The candidate set reads from the distance matrix
        distances = DistanceMatrix(self.nodes)
        object.__setattr__(self, 'distances', distances)
        object.__setattr__(
            self, 'candidates', CandidateSet(distances, self.customers, self.depot, self.k)
        )
        if self.show_candidates:
            logger.info(self.candidates.describe())

    @property
    def dimension(self) -> int:
        return len(self.nodes)

    @property
    def num_clusters(self) -> int:
        return len(self.clusters)

    @property
    def total_demand(self) -> int:
        return sum(cluster.demand for cluster in self.clusters)

    @property
    def min_vehicles(self) -> int:
        """Lower bound on the fleet needed to carry the total demand."""
        return math.ceil(self.total_demand / self.vehicle_capacity)

    def node(self, node_id: int) -> Node:
        if not 1 <= node_id <= len(self.nodes):
            raise RangeError(f"Node id {node_id} outside [1, {len(self.nodes)}]")
        return self.nodes[node_id - 1]

    def cluster(self, cluster_id: int) -> Cluster:
        if not 1 <= cluster_id <= len(self.clusters):
            raise RangeError(f"Cluster id {cluster_id} outside [1, {len(self.clusters)}]")
        return self.clusters[cluster_id - 1]

    def cluster_of(self, node) -> Optional[Cluster]:
        if isinstance(node, int):
            node = self.node(node)
        if node.cluster_id is None:
            return None
        return self.cluster(node.cluster_id)

    def describe(self) -> str:
        lines = [
            f"name = {self.name}",
            f"fleet = {self.fleet_size}",
            f"capacity = {self.vehicle_capacity}",
            f"depot = {self.depot}",
            "sets = ",
        ]
        lines.extend(str(cluster) for cluster in self.clusters)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


class Route:
    """One vehicle's visiting sequence, starting and ending at the depot."""

    def __init__(self, index: int, depot: Node, capacity_limit: int,
                 visited: Iterable[Node] = ()):
        self.index = index
        self.depot = depot
        self.capacity_limit = capacity_limit
        self.visited: List[Node] = list(visited)

    def append(self, node: Node) -> 'Route':
        self.visited.append(node)
        return self

    def extend(self, nodes: Iterable[Node]) -> 'Route':
        self.visited.extend(nodes)
        return self

    def __len__(self) -> int:
        return len(self.visited)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.visited)

    def __contains__(self, node) -> bool:
        return node in self.visited

    @property
    def demand(self) -> int:
        """Load accumulated over the visited nodes' cluster demands."""
        return sum(node.demand for node in self.visited)

    @property
    def is_overloaded(self) -> bool:
        return self.demand > self.capacity_limit

    def cost(self, distances: DistanceMatrix) -> int:
        return distances.route_length(self.depot, self.visited)

    def __repr__(self) -> str:
        return f"Route(index={self.index}, visited={[node.id for node in self.visited]})"

    def __str__(self) -> str:
        stops = " -> ".join(str(node.id) for node in self.visited)
        path = f"depot -> {stops} -> depot" if stops else "depot"
        return f"R{self.index}: {path} (demand = {self.demand}/{self.capacity_limit})"


class Solution:
    """Routes for every fleet unit of one instance.

    The instance is shared, never copied. A fresh solution holds one empty
    route per vehicle; a planner fills them in before handing the solution to
    :func:`gvrp.validation.check_solution`.
    """

    def __init__(self, instance: Instance, routes: Optional[Iterable[Route]] = None):
        self.instance = instance
        if routes is None:
            routes = (
                Route(i, instance.depot, instance.vehicle_capacity)
                for i in range(1, instance.fleet_size + 1)
            )
        self.routes: List[Route] = list(routes)

    @classmethod
    def from_routes(cls, instance: Instance, sequences: Sequence[Sequence[int]]) -> 'Solution':
        """Build a solution from node-id sequences, padding with empty routes up to the fleet size."""
        routes = [
            Route(i, instance.depot, instance.vehicle_capacity,
                  (instance.node(node_id) for node_id in sequence))
            for i, sequence in enumerate(sequences, start=1)
        ]
        for i in range(len(routes) + 1, instance.fleet_size + 1):
            routes.append(Route(i, instance.depot, instance.vehicle_capacity))
        return cls(instance, routes)

    def __len__(self) -> int:
        return len(self.routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __getitem__(self, index: int) -> Route:
        return self.routes[index]

    def is_valid(self, report: bool = False, require_cluster_coverage: bool = False) -> bool:
        return is_valid(self, report=report, require_cluster_coverage=require_cluster_coverage)

    def cost(self) -> int:
        return solution_cost(self)

    def __str__(self) -> str:
        return "\n".join(str(route) for route in self.routes)
