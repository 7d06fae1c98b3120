from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union
import yaml

from gvrp.builder import DEFAULT_K, DepotPolicy


@dataclass
class Parameters:
    """Configuration parameters for loading instances and checking solutions"""
    k: int = DEFAULT_K
    show_candidates: bool = False
    depot_policy: DepotPolicy = DepotPolicy.LAST_UNASSIGNED
    require_cluster_coverage: bool = False
    n_jobs: int = 1

    @classmethod
    def from_yaml(cls, path: Optional[Union[Path, str]] = None) -> 'Parameters':
        """Load parameters from YAML file"""
        if path is None:
            path = Path(__file__).parent / 'default_config.yaml'

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config {path} must be a mapping. Got: {type(data).__name__}")

        unknown = set(data) - {field.name for field in fields(cls)}
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(sorted(map(str, unknown)))}")

        return cls(**data)

    def with_overrides(self, **overrides) -> 'Parameters':
        """Return a copy with every non-None override applied"""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def __post_init__(self):
        """Validate parameters after initialization"""
        if isinstance(self.k, bool) or not isinstance(self.k, int) or self.k <= 0:
            raise ValueError(f"k must be a positive integer. Got: {self.k}")

        for name in ('show_candidates', 'require_cluster_coverage'):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be true or false. Got: {value!r}")

        try:
            self.depot_policy = DepotPolicy(self.depot_policy)
        except ValueError:
            options = ", ".join(policy.value for policy in DepotPolicy)
            raise ValueError(
                f"depot_policy must be one of {options}. Got: {self.depot_policy}"
            ) from None

        if isinstance(self.n_jobs, bool) or not isinstance(self.n_jobs, int) or self.n_jobs == 0:
            raise ValueError(f"n_jobs must be a non-zero integer. Got: {self.n_jobs}")
