"""Per-file parse/build units and their batch driver."""

from .batch import SUMMARY_COLUMNS, evaluate_solution, load_instance, summarize_instance, summarize_instances

__all__ = [
    "SUMMARY_COLUMNS",
    "evaluate_solution",
    "load_instance",
    "summarize_instance",
    "summarize_instances",
]
