# Configuration file for the Sphinx documentation builder.

import os
import sys
from datetime import datetime

# Add project src to sys.path so autodoc can import the package
sys.path.insert(0, os.path.abspath("../src"))

project = "hstats"
author = "hstats contributors"
current_year = datetime.now().year
copyright = f"{current_year}, {author}"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.autosummary",
    "sphinx.ext.doctest",
]

autosummary_generate = True
autodoc_member_order = "bysource"

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "furo"

napoleon_google_docstring = False
napoleon_numpy_docstring = True

# Primary document
master_doc = "index"
