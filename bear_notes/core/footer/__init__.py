"""
Embedding of note metadata in a trailing footer of the note body.
"""

from pyrollup import rollup

from . import builder, marker, stripper
from .builder import *  # noqa
from .marker import *  # noqa
from .stripper import *  # noqa

__all__ = rollup(marker, builder, stripper)
