"""Sphinx configuration for the Address Book API reference."""

import os
import sys
from datetime import datetime

# main.py and the address_book package live at the repository root
sys.path.insert(0, os.path.abspath(".."))

project = "Address Book API"
copyright = f"{datetime.now().year}, Address Book"
author = "Address Book Team"
release = "1.0.0"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]

# docstrings use the Google style (Args/Returns/Raises)
napoleon_google_docstring = True
napoleon_numpy_docstring = False
autodoc_member_order = "bysource"
autodoc_typehints = "description"

templates_path = ["_templates"]
exclude_patterns: list[str] = ["_build"]

html_theme = "alabaster"
html_static_path = ["_static"]
