"""Parsers for GVRP instance files."""

from .gvrp import GVRPParser, TokenStream, parse_gvrp, parse_gvrp_text, read_instance

__all__ = [
    "GVRPParser",
    "TokenStream",
    "parse_gvrp",
    "parse_gvrp_text",
    "read_instance",
]
