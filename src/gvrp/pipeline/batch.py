"""
Load one or many GVRP instance files.

Each file goes through its own parse -> build -> summarise unit with no state
shared between files, so a batch can be fanned out with joblib and a broken
file only fails its own row.
"""
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import pandas as pd
from joblib import Parallel, delayed

from gvrp.config.parameters import Parameters
from gvrp.exceptions import GVRPError
from gvrp.models import Instance, Solution
from gvrp.parsers.gvrp import GVRPParser
from gvrp.utils.logging import ProgressTracker
from gvrp.validation import ValidationReport, check_solution

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    'Instance',
    'Name',
    'Dimension',
    'Clusters',
    'Vehicles',
    'Capacity',
    'Depot_ID',
    'Total_Demand',
    'Min_Vehicles',
    'Status',
    'Error',
]


def load_instance(path: Union[str, Path], params: Optional[Parameters] = None) -> Instance:
    """Parse and build a single instance file using ``params`` (defaults from YAML)."""
    if params is None:
        params = Parameters.from_yaml()
    parser = GVRPParser(
        path,
        k=params.k,
        show_candidates=params.show_candidates,
        depot_policy=params.depot_policy,
    )
    return parser.parse()


def evaluate_solution(solution: Solution, params: Optional[Parameters] = None) -> ValidationReport:
    """Check a solution with the coverage rule taken from ``params``."""
    if params is None:
        params = Parameters.from_yaml()
    report = check_solution(solution, require_cluster_coverage=params.require_cluster_coverage)
    if not report.valid:
        logger.info(f"Solution for {solution.instance.name} rejected: {report.reason}")
    return report


def summarize_instance(instance: Instance) -> Dict:
    return {
        'Name': instance.name,
        'Dimension': instance.dimension,
        'Clusters': instance.num_clusters,
        'Vehicles': instance.fleet_size,
        'Capacity': instance.vehicle_capacity,
        'Depot_ID': instance.depot.id,
        'Total_Demand': instance.total_demand,
        'Min_Vehicles': instance.min_vehicles,
    }


def _summarize_file(path: Union[str, Path], params: Parameters) -> Dict:
    row = {'Instance': Path(path).stem}
    try:
        instance = load_instance(path, params)
    except (GVRPError, OSError) as e:
        logger.error(f"Failed to load {path}: {e}")
        row.update(Status='error', Error=str(e))
        return row

    row.update(summarize_instance(instance))
    row.update(Status='ok', Error=None)
    return row


def summarize_instances(
    paths: Iterable[Union[str, Path]],
    params: Optional[Parameters] = None,
    progress: Optional[ProgressTracker] = None,
) -> pd.DataFrame:
    """Load every file independently and return one summary row per file."""
    if params is None:
        params = Parameters.from_yaml()
    paths = list(paths)

    results = Parallel(n_jobs=params.n_jobs, return_as='generator')(
        delayed(_summarize_file)(path, params) for path in paths
    )

    rows = []
    for row in results:
        rows.append(row)
        if progress is not None:
            if row['Status'] == 'ok':
                progress.advance(f"{row['Instance']}: {row['Dimension']} nodes, {row['Clusters']} sets")
            else:
                progress.advance(f"{row['Instance']}: {row['Error']}", status='error')

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
