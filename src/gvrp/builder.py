"""Order-independent accumulators that produce one immutable Instance.

Nodes and clusters are addressed by dense 1-based ids. Cluster membership is
recorded as a node id -> cluster id edge map and is only resolved into Node
and Cluster values by :meth:`InstanceBuilder.build`, so memberships may be
declared before or after coordinates and demands.
"""
import logging
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .exceptions import DepotInferenceError, RangeError, ReferenceGapWarning, StructuralParseError
from .models import Cluster, Instance, Node

logger = logging.getLogger(__name__)

DEFAULT_K = 20


class DepotPolicy(Enum):
    """Which node without cluster membership becomes the depot."""
    # Last unassigned node wins; every node, depot included, is a customer
    LAST_UNASSIGNED = "last_unassigned"
    # Exactly one unassigned node allowed; it is excluded from the customers
    FIRST_UNASSIGNED = "first_unassigned"


@dataclass
class NodeBuilder:
    id: int
    position: Optional[Tuple[int, int]] = None


@dataclass
class ClusterBuilder:
    id: int
    demand: Optional[int] = None


def _require_positive(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise RangeError(f"{what} must be a positive number. Got: {value}")
    return value


class InstanceBuilder:
    """Single-owner, mutable accumulator for an :class:`Instance`.

    Every mutator returns the builder so calls can be chained. Nothing is
    linked until :meth:`build`; a failing build leaves no partial instance.
    """

    def __init__(self):
        self._name: str = ""
        self._nodes: List[NodeBuilder] = []
        self._clusters: List[ClusterBuilder] = []
        self._edges: Dict[int, int] = {}
        self._fleet_size = 0
        self._vehicle_capacity = 0
        self._k = DEFAULT_K
        self._show_candidates = False
        self._depot_policy = DepotPolicy.LAST_UNASSIGNED

    def name(self, name: str) -> 'InstanceBuilder':
        self._name = name
        return self

    def fleet_size(self, count: int) -> 'InstanceBuilder':
        self._fleet_size = _require_positive(count, "Vehicle count")
        return self

    def vehicle_capacity(self, capacity: int) -> 'InstanceBuilder':
        self._vehicle_capacity = _require_positive(capacity, "Vehicle capacity")
        return self

    def dimension(self, d: int) -> 'InstanceBuilder':
        """Allocate node builders 1..d (depot included), discarding earlier ones."""
        _require_positive(d, "Dimension")
        self._nodes = [NodeBuilder(i) for i in range(1, d + 1)]
        self._edges.clear()
        return self

    def customer_set_count(self, count: int) -> 'InstanceBuilder':
        """Allocate cluster builders 1..count, discarding earlier ones."""
        _require_positive(count, "Set count")
        self._clusters = [ClusterBuilder(i) for i in range(1, count + 1)]
        self._edges.clear()
        return self

    def customer_position(self, node_id: int, x: int, y: int) -> 'InstanceBuilder':
        self._node_builder(node_id).position = (x, y)
        return self

    def customer_set(self, node_id: int, set_id: int) -> 'InstanceBuilder':
        """Record that node ``node_id`` belongs to cluster ``set_id``."""
        node = self._node_builder(node_id)
        cluster = self._cluster_builder(set_id)
        previous = self._edges.get(node.id)
        if previous is not None and previous != cluster.id:
            warnings.warn(
                f"Node {node.id} listed in sets {previous} and {cluster.id}; keeping set {cluster.id}",
                ReferenceGapWarning,
                stacklevel=2,
            )
        self._edges[node.id] = cluster.id
        return self

    def customer_set_demand(self, set_id: int, demand: int) -> 'InstanceBuilder':
        if isinstance(demand, bool) or not isinstance(demand, int) or demand < 0:
            raise RangeError(f"Demand of set {set_id} must be a non-negative integer. Got: {demand}")
        self._cluster_builder(set_id).demand = demand
        return self

    def k(self, k: int) -> 'InstanceBuilder':
        """Size of each node's candidate neighbour list."""
        self._k = _require_positive(k, "Candidate set size k")
        return self

    def show_candidates(self, show: bool = True) -> 'InstanceBuilder':
        self._show_candidates = bool(show)
        return self

    def depot_policy(self, policy: Union[DepotPolicy, str]) -> 'InstanceBuilder':
        self._depot_policy = DepotPolicy(policy)
        return self

    def _node_builder(self, node_id: int) -> NodeBuilder:
        if not 1 <= node_id <= len(self._nodes):
            raise RangeError(f"Node id {node_id} outside [1, {len(self._nodes)}]")
        return self._nodes[node_id - 1]

    def _cluster_builder(self, set_id: int) -> ClusterBuilder:
        if not 1 <= set_id <= len(self._clusters):
            raise RangeError(f"Set id {set_id} outside [1, {len(self._clusters)}]")
        return self._clusters[set_id - 1]

    def build(self) -> Instance:
        """Link every recorded edge and return the finished, immutable instance."""
        _require_positive(len(self._nodes), "Dimension")
        _require_positive(len(self._clusters), "Set count")
        _require_positive(self._fleet_size, "Vehicle count")
        _require_positive(self._vehicle_capacity, "Vehicle capacity")

        for node in self._nodes:
            if node.position is None:
                raise StructuralParseError(f"Node {node.id} has no coordinates")
        for cluster in self._clusters:
            if cluster.demand is None:
                raise StructuralParseError(f"Set {cluster.id} has no demand")

        demands = {cluster.id: cluster.demand for cluster in self._clusters}
        members: Dict[int, List[Node]] = {cluster.id: [] for cluster in self._clusters}
        nodes: List[Node] = []
        unassigned: List[Node] = []
        for builder in self._nodes:
            cluster_id = self._edges.get(builder.id)
            if cluster_id is None:
                node = Node(builder.id, builder.position)
                unassigned.append(node)
            else:
                node = Node(builder.id, builder.position, cluster_id, demands[cluster_id])
                members[cluster_id].append(node)
            nodes.append(node)

        clusters = tuple(
            Cluster(cluster.id, cluster.demand, frozenset(members[cluster.id]))
            for cluster in self._clusters
        )
        depot, customers = self._choose_depot(nodes, unassigned)
        logger.debug(
            f"Linked {len(self._edges)} memberships across {len(clusters)} sets; depot is node {depot.id}"
        )

        return Instance(
            name=self._name,
            depot=depot,
            nodes=tuple(nodes),
            clusters=clusters,
            fleet_size=self._fleet_size,
            vehicle_capacity=self._vehicle_capacity,
            k=self._k,
            customers=customers,
            show_candidates=self._show_candidates,
        )

    def _choose_depot(self, nodes: List[Node], unassigned: List[Node]) -> Tuple[Node, Tuple[Node, ...]]:
        if not unassigned:
            raise DepotInferenceError("Every node belongs to a set; no depot can be inferred")

        ids = [node.id for node in unassigned]
        if self._depot_policy is DepotPolicy.FIRST_UNASSIGNED:
            if len(unassigned) > 1:
                raise DepotInferenceError(
                    f"Expected exactly one node without a set, found {len(unassigned)}: {ids}"
                )
            depot = unassigned[0]
            return depot, tuple(node for node in nodes if node != depot)

        depot = unassigned[-1]
        if len(unassigned) > 1:
            warnings.warn(
                f"{len(unassigned)} nodes have no set {ids}; using node {depot.id} as depot",
                ReferenceGapWarning,
                stacklevel=3,
            )
        return depot, tuple(nodes)
