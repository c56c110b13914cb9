"""
bear-notes: a CLI toolkit for Bear which keeps markdown files and notes in
sync by embedding note ids in a footer.
"""

from pyrollup import rollup

from . import core
from .core import *  # noqa

__all__ = rollup(core)
