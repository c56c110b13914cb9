"""
Filesystem workflows: reconcile note files with Bear.
"""

from pyrollup import rollup

from . import batch, files, note
from .batch import *  # noqa
from .files import *  # noqa
from .note import *  # noqa

__all__ = rollup(files, note, batch)
