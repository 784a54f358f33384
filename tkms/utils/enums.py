"""Enum/string coercion for columns stored as plain strings"""
from enum import Enum


def enum_to_str(v):
    """
    Column value for an enum member or an already-plain string

    >>> enum_to_str(UserRole.SUPER_ADMIN)
    'super-admin'
    >>> enum_to_str('late-in')
    'late-in'
    """
    if v is None:
        return None
    return v.value if isinstance(v, Enum) else str(v)
