"""
Simulator settings.

Values come from the optional ``AUTOMATA_SIMULATOR`` dictionary in the Django
settings module. The core can also be used without Django settings configured,
in which case the defaults below apply.
"""
from typing import Any, Dict

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULTS: Dict[str, Any] = {
    # Turing machines may never halt; run() gives up after this many steps
    'TM_MAX_STEPS': 1000,
    # Upper bound on PDA configurations explored by one breadth-first search
    'PDA_MAX_CONFIGURATIONS': 100000,
    'STACK_BOTTOM': 'Z',
}


def get_setting(name: str) -> Any:
    """
    Look up a simulator setting.

    Args:
        name: Key of the setting, e.g. 'TM_MAX_STEPS'

    Returns:
        The configured value, or the default when it is not overridden
    """
    if name not in DEFAULTS:
        raise KeyError(f'Unknown simulator setting: {name}')

    try:
        overrides = getattr(settings, 'AUTOMATA_SIMULATOR', None) or {}
    except ImproperlyConfigured:
        overrides = {}

    return overrides.get(name, DEFAULTS[name])
