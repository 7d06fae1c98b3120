import logging
import pytest
from pathlib import Path

# Define project root for path fixtures
repo_root = Path(__file__).resolve().parent.parent
assets_dir = repo_root / "tests" / "_assets" / "gvrp"


def _gvrp_text(coords, sets, demands, name="toy", vehicles=1, capacity=10,
               dimension=None, set_count=None):
    """Render a GVRP instance file from plain dicts.

    coords: node id -> (x, y); sets: set id -> [node ids]; demands: set id -> demand
    """
    lines = [
        f"NAME : {name}",
        "COMMENT : GVRP",
        f"DIMENSION : {len(coords) if dimension is None else dimension}",
        f"VEHICLES : {vehicles}",
        f"GVRP_SETS : {len(sets) if set_count is None else set_count}",
        f"CAPACITY : {capacity}",
        "EDGE_WEIGHT_TYPE : EUC_2D",
        "NODE_COORD_SECTION",
    ]
    lines += [f"{node_id} {x} {y}" for node_id, (x, y) in coords.items()]
    lines.append("GVRP_SET_SECTION")
    lines += [f"{set_id} {' '.join(str(n) for n in members)} -1" for set_id, members in sets.items()]
    lines.append("DEMAND_SECTION")
    lines += [f"{set_id} {demand}" for set_id, demand in demands.items()]
    return "\n".join(lines) + "\n"


@pytest.fixture(scope="session")
def sample_gvrp_path():
    """Seven nodes, depot 1, sets {2,3} {4,5} {6,7} with demands 4, 5, 6"""
    return assets_dir / "sample.gvrp"

@pytest.fixture(scope="session")
def shuffled_gvrp_path():
    """Same instance as sample.gvrp with every section listed out of id order"""
    return assets_dir / "shuffled_sets.gvrp"

@pytest.fixture(scope="session")
def broken_gvrp_path():
    """Instance file truncated before its DEMAND_SECTION"""
    return assets_dir / "missing_demand_section.gvrp"

@pytest.fixture(scope="session")
def sample_text(sample_gvrp_path):
    return sample_gvrp_path.read_text()

@pytest.fixture
def sample_instance(sample_gvrp_path):
    from gvrp.parsers.gvrp import parse_gvrp
    return parse_gvrp(sample_gvrp_path)

@pytest.fixture
def gvrp_text():
    """Factory rendering instance text from dicts"""
    return _gvrp_text

@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() side effects after the test"""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(False)
