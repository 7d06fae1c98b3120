"""Legality and cost evaluation for solutions.

Both checks are total: an illegal solution is reported through the returned
value, never through an exception, and the solution is left untouched.
"""
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

CAPACITY_EXCEEDED = "Route capacity surpasses maximum"
EMPTY_ROUTE = "Empty route"
OVERLAPPING_ROUTES = "Overlapping customer sets"


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of a solution check: legality, total cost and the first violated rule."""
    valid: bool
    cost: int
    reason: Optional[str] = None
    route_index: Optional[int] = None

    def __bool__(self) -> bool:
        return self.valid


def solution_cost(solution) -> int:
    """Sum of every route's depot-anchored tour length."""
    distances = solution.instance.distances
    return sum(route.cost(distances) for route in solution.routes)


def check_solution(solution, require_cluster_coverage: bool = False) -> ValidationReport:
    """Check a solution against capacity, non-empty route and disjointness rules.

    Routes are scanned in order and the first violation wins. Node
    disjointness is detected by comparing the running number of visits with
    the size of the set of visited ids.

    With ``require_cluster_coverage`` the solution must additionally visit
    every cluster through exactly one member and never visit a node that has
    no cluster.
    """
    instance = solution.instance
    cost = solution_cost(solution)

    visited_ids = set()
    visit_count = 0
    for route in solution.routes:
        if route.demand > instance.vehicle_capacity:
            return ValidationReport(False, cost, CAPACITY_EXCEEDED, route.index)
        if len(route) == 0:
            return ValidationReport(False, cost, EMPTY_ROUTE, route.index)
        visit_count += len(route)
        visited_ids.update(node.id for node in route)
        if visit_count != len(visited_ids):
            return ValidationReport(False, cost, OVERLAPPING_ROUTES, route.index)

    if require_cluster_coverage:
        reason = _coverage_violation(solution)
        if reason is not None:
            return ValidationReport(False, cost, reason)

    return ValidationReport(True, cost)


def _coverage_violation(solution) -> Optional[str]:
    visits = Counter(node.cluster_id for route in solution.routes for node in route)
    if visits.get(None):
        return "Route visits a node without cluster"
    for cluster in solution.instance.clusters:
        count = visits.get(cluster.id, 0)
        if count == 0:
            return f"Cluster {cluster.compact()} is not visited"
        if count > 1:
            return f"Cluster {cluster.compact()} visited {count} times"
    return None


def is_valid(solution, report: bool = False, require_cluster_coverage: bool = False) -> bool:
    result = check_solution(solution, require_cluster_coverage=require_cluster_coverage)
    if report and not result.valid:
        logger.info(result.reason)
    return result.valid
