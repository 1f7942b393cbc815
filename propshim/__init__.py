# propshim/__init__.py

"""
propshim: props envelope and equivalence engine

Sits between components with ordinary Python props (dataclasses, plain
objects, mappings) and a host reconciliation runtime that reads ``key`` and
``ref`` off the top level of whatever it is given.

- ``wrap_props`` / ``unwrap_props``: the envelope handed to the host runtime
- ``props_equivalent``: "would these props render the same?" for update skipping
- ``bind`` / ``BoundCallback``: callbacks that compare by (function, target)
- ``set_trust_homogeneous_origin`` / ``configure``: the one process-wide switch
"""

from .config import Config, get_config
from .fields import MISSING, iter_prop_fields, read_prop_field
from .callbacks import BoundCallback, bind, bound_from
from .envelope import (
    ABSENT,
    WrappedProps,
    wrap_props,
    unwrap_props,
    extract_key,
    extract_ref,
)
from .equivalence import (
    props_equivalent,
    callbacks_equivalent,
    trust_homogeneous_origin,
    set_trust_homogeneous_origin,
    configure,
)

__all__ = [
    # --- Envelope ---
    'WrappedProps', 'wrap_props', 'unwrap_props', 'extract_key', 'extract_ref', 'ABSENT',
    # --- Equivalence ---
    'props_equivalent', 'callbacks_equivalent',
    'trust_homogeneous_origin', 'set_trust_homogeneous_origin', 'configure',
    # --- Callbacks ---
    'BoundCallback', 'bind', 'bound_from',
    # --- Fields ---
    'MISSING', 'iter_prop_fields', 'read_prop_field',
    # --- Config ---
    'Config', 'get_config',
]

__version__ = "0.1.0"
