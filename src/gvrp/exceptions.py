"""Error taxonomy for parsing, building and inspecting GVRP instances."""
from typing import Optional


class GVRPError(Exception):
    """Base class for every error raised by this package."""


class StructuralParseError(GVRPError, ValueError):
    """Expected keyword, section or token not found, or an entity left unpopulated."""

    def __init__(self, message: str, position: Optional[int] = None):
        if position is not None:
            message = f"{message} (token {position})"
        super().__init__(message)
        self.position = position


class RangeError(GVRPError, ValueError):
    """A required count is non-positive or an id falls outside its allocated range."""


class DepotInferenceError(GVRPError, ValueError):
    """No usable depot could be inferred from the cluster memberships."""


class ReferenceGapWarning(UserWarning):
    """Cluster memberships leave the node graph in a questionable state."""
