"""gvrp package

Data model, parser and solution checker for the Generalized Vehicle Routing
Problem: a depot, customer nodes partitioned into demand-bearing sets
(clusters), and a fleet of identical capacity-limited vehicles.

Key entry points
----------------
• `parse_gvrp` / `GVRPParser` read an instance file into an immutable `Instance`
• `InstanceBuilder` assembles an instance programmatically
• `Solution` / `Route` hold routes; `check_solution` decides legality and cost
• `gvrp-inspect` (see `gvrp.cli`) prints or summarises instance files
"""

from .builder import DepotPolicy, InstanceBuilder
from .distance import CandidateSet, DistanceMatrix
from .exceptions import (
    DepotInferenceError,
    GVRPError,
    RangeError,
    ReferenceGapWarning,
    StructuralParseError,
)
from .models import Cluster, Instance, Node, Route, Solution
from .parsers import GVRPParser, parse_gvrp, parse_gvrp_text
from .validation import ValidationReport, check_solution, is_valid, solution_cost

__all__ = [
    # Models
    "Node",
    "Cluster",
    "Instance",
    "Route",
    "Solution",
    # Construction
    "InstanceBuilder",
    "DepotPolicy",
    "GVRPParser",
    "parse_gvrp",
    "parse_gvrp_text",
    # Collaborators
    "DistanceMatrix",
    "CandidateSet",
    # Checks
    "ValidationReport",
    "check_solution",
    "is_valid",
    "solution_cost",
    # Errors
    "GVRPError",
    "StructuralParseError",
    "RangeError",
    "DepotInferenceError",
    "ReferenceGapWarning",
]
