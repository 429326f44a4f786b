# Sphinx configuration for the germline-burden API docs.

import os
import sys

# autodoc imports the package from the src/ layout
sys.path.insert(0, os.path.abspath("../src"))

from germline_burden import __version__  # noqa: E402

project = "germline-burden"
release = __version__
version = ".".join(release.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
]

exclude_patterns = ["_build"]

autosummary_generate = True
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
}
autodoc_typehints = "description"

# Docstrings are numpy style throughout
napoleon_google_docstring = False
napoleon_numpy_docstring = True
napoleon_attr_annotations = True

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable/", None),
    "pandas": ("https://pandas.pydata.org/docs/", None),
    "scipy": ("https://docs.scipy.org/doc/scipy/", None),
    "statsmodels": ("https://www.statsmodels.org/stable/", None),
}

html_theme = "alabaster"
html_title = f"germline-burden {release}"
