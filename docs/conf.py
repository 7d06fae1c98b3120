import datetime
import sys
from pathlib import Path

# -- Path setup --------------------------------------------------------------
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / 'src'))

# -- Project information -----------------------------------------------------
project = 'GVRP Instance Toolkit'
author = 'GVRP Maintainers'
copyright = f"{datetime.datetime.now().year}, {author}"

# -- General configuration ---------------------------------------------------
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
]
autodoc_member_order = 'bysource'
napoleon_google_docstring = True
napoleon_numpy_docstring = False

# -- HTML --------------------------------------------------------------------
html_theme = 'sphinx_rtd_theme'
