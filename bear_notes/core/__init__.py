"""
This module implements the footer reconciliation engine and access to Bear.
"""

from pyrollup import rollup

from . import exceptions, footer, models, policy, session, store
from .exceptions import *  # noqa
from .footer import *  # noqa
from .models import *  # noqa
from .policy import *  # noqa
from .session import *  # noqa
from .store import *  # noqa

__all__ = rollup(
    session,
    store,
    policy,
    footer,
    models,
    exceptions,
)
