"""Tests for loading several instance files as independent units."""

import pandas as pd
import pytest

from gvrp.builder import DepotPolicy
from gvrp.config.parameters import Parameters
from gvrp.exceptions import DepotInferenceError
from gvrp.models import Solution
from gvrp.pipeline.batch import (
    SUMMARY_COLUMNS,
    evaluate_solution,
    load_instance,
    summarize_instance,
    summarize_instances,
)


class DummyProgress:
    def __init__(self):
        self.calls = []
    def advance(self, message=None, status='success'):
        self.calls.append((message, status))


def test_load_instance_uses_parameters(sample_gvrp_path):
    params = Parameters(k=1, depot_policy=DepotPolicy.FIRST_UNASSIGNED)
    inst = load_instance(sample_gvrp_path, params)
    assert inst.k == 1
    assert inst.candidates[2] == (4,)
    assert inst.depot not in inst.customers


def test_load_instance_defaults(sample_gvrp_path):
    inst = load_instance(sample_gvrp_path)
    assert inst.k == 20
    assert inst.customers == inst.nodes


def test_load_instance_propagates_errors(tmp_path, gvrp_text):
    path = tmp_path / "two-depots.gvrp"
    path.write_text(gvrp_text({1: (0, 0), 2: (1, 1), 3: (2, 2)}, {1: [2]}, {1: 1}))
    with pytest.raises(DepotInferenceError):
        load_instance(path, Parameters(depot_policy='first_unassigned'))


def test_summarize_instance(sample_instance):
    row = summarize_instance(sample_instance)
    assert row == {
        'Name': 'sample-n7-k2-C3',
        'Dimension': 7,
        'Clusters': 3,
        'Vehicles': 2,
        'Capacity': 10,
        'Depot_ID': 1,
        'Total_Demand': 15,
        'Min_Vehicles': 2,
    }


def test_summarize_instances_isolates_failures(sample_gvrp_path, broken_gvrp_path, shuffled_gvrp_path):
    progress = DummyProgress()
    df = summarize_instances(
        [sample_gvrp_path, broken_gvrp_path, shuffled_gvrp_path],
        Parameters(),
        progress=progress,
    )
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == SUMMARY_COLUMNS
    assert df['Instance'].tolist() == ['sample', 'missing_demand_section', 'shuffled_sets']
    assert df['Status'].tolist() == ['ok', 'error', 'ok']
    assert 'DEMAND_SECTION' in df.loc[1, 'Error']
    assert df.loc[0, 'Total_Demand'] == df.loc[2, 'Total_Demand'] == 15
    assert [status for _, status in progress.calls] == ['success', 'error', 'success']


def test_summarize_missing_file(tmp_path):
    df = summarize_instances([tmp_path / 'absent.gvrp'])
    assert df.loc[0, 'Status'] == 'error'
    assert 'not found' in df.loc[0, 'Error']


def test_summarize_in_parallel_matches_sequential(sample_gvrp_path, shuffled_gvrp_path):
    paths = [sample_gvrp_path, shuffled_gvrp_path]
    sequential = summarize_instances(paths, Parameters(n_jobs=1))
    parallel = summarize_instances(paths, Parameters(n_jobs=2))
    pd.testing.assert_frame_equal(sequential, parallel)


def test_evaluate_solution_applies_coverage_setting(sample_instance):
    solution = Solution.from_routes(sample_instance, [[2], [3]])
    assert evaluate_solution(solution, Parameters()).valid
    report = evaluate_solution(solution, Parameters(require_cluster_coverage=True))
    assert not report.valid
    assert report.cost == 10 + 20


def test_summarize_non_utf8_file_is_an_error_row(tmp_path, sample_gvrp_path):
    latin1 = tmp_path / 'latin1.gvrp'
    latin1.write_bytes(b"NAME : caf\xe9\n")
    df = summarize_instances([sample_gvrp_path, latin1])
    assert df['Status'].tolist() == ['ok', 'error']
    assert 'not UTF-8' in df.loc[1, 'Error']
