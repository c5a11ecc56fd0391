# Sphinx configuration for the listenable API reference (index.rst).

import os
import sys

sys.path.insert(0, os.path.abspath("../.."))

project = "listenable"
author = "listenable contributors"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
    "sphinx_immaterial",
]

html_theme = "sphinx_immaterial"

# Docstrings are Google style only; Args/Returns/Raises/Attributes sections
# render as fields, and class attributes stay with their class.
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_use_ivar = True
napoleon_include_init_with_doc = False

# index.rst lists modules with bare automodule directives.
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "exclude-members": "__weakref__",
}
autodoc_typehints = "description"

# InterceptionSettings is a pydantic model; signatures use stdlib types.
intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "pydantic": ("https://docs.pydantic.dev/latest", None),
}
