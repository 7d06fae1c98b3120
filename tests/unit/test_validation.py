"""Tests for solution legality and cost."""

import logging

import pytest

from gvrp.models import Solution
from gvrp.validation import (
    CAPACITY_EXCEEDED,
    EMPTY_ROUTE,
    OVERLAPPING_ROUTES,
    check_solution,
    is_valid,
    solution_cost,
)


def test_legal_solution(sample_instance):
    solution = Solution.from_routes(sample_instance, [[2, 4], [6]])
    report = check_solution(solution)
    assert report.valid
    assert bool(report)
    assert report.reason is None
    # (5 + 3 + 5) + (10 + 10)
    assert report.cost == 33
    assert solution.cost() == 33
    assert solution.is_valid()


def test_capacity_exceeded(sample_instance):
    # sets 3 twice: 6 + 6 = 12 > 10
    solution = Solution.from_routes(sample_instance, [[6, 7], [2]])
    report = check_solution(solution)
    assert not report.valid
    assert report.reason == CAPACITY_EXCEEDED
    assert report.route_index == 1


def test_route_load_equal_to_capacity_is_fine(sample_instance):
    # 4 + 6 = 10
    solution = Solution.from_routes(sample_instance, [[2, 6], [4]])
    assert is_valid(solution)


def test_node_shared_by_two_routes(sample_instance):
    solution = Solution.from_routes(sample_instance, [[2, 7], [2, 4]])
    report = check_solution(solution)
    assert not report.valid
    assert report.reason == OVERLAPPING_ROUTES
    assert report.route_index == 2


def test_node_repeated_inside_one_route(sample_instance):
    solution = Solution.from_routes(sample_instance, [[2, 2], [4]])
    assert check_solution(solution).reason == OVERLAPPING_ROUTES


def test_unused_vehicle_is_an_empty_route(sample_instance):
    solution = Solution.from_routes(sample_instance, [[2, 4]])
    report = check_solution(solution)
    assert not report.valid
    assert report.reason == EMPTY_ROUTE
    assert report.route_index == 2


def test_no_routes_is_valid_with_zero_cost(sample_instance):
    solution = Solution(sample_instance, routes=[])
    report = check_solution(solution)
    assert report.valid
    assert report.cost == 0


def test_first_violation_wins(sample_instance):
    # Route 1 is empty, route 2 is overloaded
    solution = Solution.from_routes(sample_instance, [[], [6, 7]])
    assert check_solution(solution).reason == EMPTY_ROUTE


def test_cluster_coverage_is_opt_in(sample_instance):
    # Both routes serve set 1; set 2 and 3 are never visited
    solution = Solution.from_routes(sample_instance, [[2], [3]])
    assert check_solution(solution).valid
    report = check_solution(solution, require_cluster_coverage=True)
    assert not report.valid
    assert report.reason == "Cluster S1 visited 2 times"


def test_cluster_coverage_missing_set(sample_instance):
    solution = Solution.from_routes(sample_instance, [[2], [4]])
    report = check_solution(solution, require_cluster_coverage=True)
    assert report.reason == "Cluster S3 is not visited"


def test_cluster_coverage_rejects_depot_visit(sample_instance):
    solution = Solution.from_routes(sample_instance, [[1, 2, 4], [6]])
    assert check_solution(solution).valid
    report = check_solution(solution, require_cluster_coverage=True)
    assert report.reason == "Route visits a node without cluster"


def test_cluster_coverage_accepts_one_member_per_set(sample_instance):
    solution = Solution.from_routes(sample_instance, [[3, 5], [7]])
    assert solution.is_valid(require_cluster_coverage=True)


def test_single_node_round_trips(sample_instance):
    solution = Solution.from_routes(sample_instance, [[2], [4]])
    depot = sample_instance.depot
    expected = sum(2 * sample_instance.distances.distance(depot, n) for n in (2, 4))
    assert solution_cost(solution) == expected == 20


def test_check_does_not_mutate(sample_instance):
    solution = Solution.from_routes(sample_instance, [[2, 4], [4, 6]])
    before = [[n.id for n in route] for route in solution]
    check_solution(solution, require_cluster_coverage=True)
    assert [[n.id for n in route] for route in solution] == before


def test_report_logs_reason(sample_instance, caplog):
    caplog.set_level(logging.INFO)
    solution = Solution.from_routes(sample_instance, [[2, 4]])
    assert not solution.is_valid(report=True)
    assert any(
        rec[0] == 'gvrp.validation' and rec[2] == EMPTY_ROUTE
        for rec in caplog.record_tuples
    )


def test_quiet_by_default(sample_instance, caplog):
    caplog.set_level(logging.INFO)
    solution = Solution.from_routes(sample_instance, [[2, 4]])
    assert not solution.is_valid()
    assert not [rec for rec in caplog.record_tuples if rec[0] == 'gvrp.validation']
