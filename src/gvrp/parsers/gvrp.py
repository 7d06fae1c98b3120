"""Parser for GVRP instance files.

The format is read as a flat token stream with a fixed section order::

    NAME : <string>
    COMMENT : GVRP
    DIMENSION : <int>
    VEHICLES : <int>
    GVRP_SETS : <int>
    CAPACITY : <int>
    EDGE_WEIGHT_TYPE : EUC_2D
    NODE_COORD_SECTION
    <node id> <x> <y>                  (DIMENSION lines)
    GVRP_SET_SECTION
    <set id> <node id> ... -1          (GVRP_SETS lines)
    DEMAND_SECTION
    <set id> <demand>                  (GVRP_SETS lines)

Keywords are case-sensitive. The first mismatch aborts the parse.
"""
import logging
import re
from pathlib import Path
from typing import List, Union

from ..builder import DEFAULT_K, DepotPolicy, InstanceBuilder
from ..exceptions import StructuralParseError
from ..models import Instance

logger = logging.getLogger(__name__)

# A colon is always its own token, so "NAME: x" and "NAME : x" read alike
_TOKEN_RE = re.compile(r":|[^\s:]+")
_INT_RE = re.compile(r"-?[0-9]+")
SET_TERMINATOR = -1


class TokenStream:
    """Sequential reader over whitespace/colon delimited tokens."""

    def __init__(self, text: str):
        self._tokens: List[str] = _TOKEN_RE.findall(text)
        self.position = 0

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self.position

    def next(self, expected: str = "token") -> str:
        if self.position >= len(self._tokens):
            raise StructuralParseError(f"Unexpected end of input, expected {expected}", self.position + 1)
        token = self._tokens[self.position]
        self.position += 1
        return token

    def expect(self, literal: str) -> str:
        token = self.next(repr(literal))
        if token != literal:
            raise StructuralParseError(f"Expected {literal!r}, found {token!r}", self.position)
        return token

    def keyword(self, keyword: str) -> None:
        """Consume ``KEYWORD :``."""
        self.expect(keyword)
        self.expect(":")

    def next_int(self, what: str) -> int:
        token = self.next(what)
        # Plain ASCII digits only; int() alone would take "+7", "1_0" or "٣"
        if not _INT_RE.fullmatch(token):
            raise StructuralParseError(f"Expected integer {what}, found {token!r}", self.position)
        return int(token)


def read_instance(stream: TokenStream, builder: InstanceBuilder) -> InstanceBuilder:
    """Drive ``builder`` through every section of the stream, in order."""
    stream.keyword("NAME")
    builder.name(stream.next("instance name"))
    stream.keyword("COMMENT")
    stream.expect("GVRP")

    stream.keyword("DIMENSION")
    dimension = stream.next_int("dimension")
    builder.dimension(dimension)
    stream.keyword("VEHICLES")
    builder.fleet_size(stream.next_int("vehicle count"))
    stream.keyword("GVRP_SETS")
    set_count = stream.next_int("set count")
    builder.customer_set_count(set_count)
    stream.keyword("CAPACITY")
    builder.vehicle_capacity(stream.next_int("vehicle capacity"))
    stream.keyword("EDGE_WEIGHT_TYPE")
    stream.expect("EUC_2D")

    stream.expect("NODE_COORD_SECTION")
    for _ in range(dimension):
        node_id = stream.next_int("node id")
        x = stream.next_int("x coordinate")
        y = stream.next_int("y coordinate")
        builder.customer_position(node_id, x, y)

    stream.expect("GVRP_SET_SECTION")
    for _ in range(set_count):
        set_id = stream.next_int("set id")
        node_id = stream.next_int("node id")
        while node_id != SET_TERMINATOR:
            builder.customer_set(node_id, set_id)
            node_id = stream.next_int("node id or -1")

    stream.expect("DEMAND_SECTION")
    for _ in range(set_count):
        set_id = stream.next_int("set id")
        demand = stream.next_int("demand")
        builder.customer_set_demand(set_id, demand)

    if stream.remaining:
        logger.debug(f"Ignoring {stream.remaining} trailing token(s)")
    return builder


def parse_gvrp_text(
    text: str,
    k: int = DEFAULT_K,
    show_candidates: bool = False,
    depot_policy: Union[DepotPolicy, str] = DepotPolicy.LAST_UNASSIGNED,
) -> Instance:
    """Parse GVRP instance text and build the instance."""
    builder = (
        InstanceBuilder()
        .k(k)
        .show_candidates(show_candidates)
        .depot_policy(depot_policy)
    )
    read_instance(TokenStream(text), builder)
    instance = builder.build()
    logger.info(
        f"Parsed GVRP instance {instance.name}: "
        f"{instance.dimension} nodes, {instance.num_clusters} sets, "
        f"{instance.fleet_size} vehicles, capacity={instance.vehicle_capacity}"
    )
    return instance


class GVRPParser:
    """Parser for a GVRP instance file on disk."""

    def __init__(
        self,
        file_path: Union[str, Path],
        k: int = DEFAULT_K,
        show_candidates: bool = False,
        depot_policy: Union[DepotPolicy, str] = DepotPolicy.LAST_UNASSIGNED,
    ):
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"GVRP instance file not found: {file_path}")

        self.instance_name = self.file_path.stem
        self.k = k
        self.show_candidates = show_candidates
        self.depot_policy = DepotPolicy(depot_policy)

    def parse(self) -> Instance:
        try:
            text = self.file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StructuralParseError(f"{self.file_path} is not UTF-8 text: {e}") from e
        return parse_gvrp_text(
            text,
            k=self.k,
            show_candidates=self.show_candidates,
            depot_policy=self.depot_policy,
        )


def parse_gvrp(
    path: Union[str, Path],
    k: int = DEFAULT_K,
    show_candidates: bool = False,
    depot_policy: Union[DepotPolicy, str] = DepotPolicy.LAST_UNASSIGNED,
) -> Instance:
    """Read and build the instance stored at ``path``."""
    return GVRPParser(path, k=k, show_candidates=show_candidates, depot_policy=depot_policy).parse()
