"""Configuration loading, validation and system definitions."""

from .systems import SystemProfile, SystemsError, UNKNOWN_SYSTEM, find_system, parse_systems

__all__ = [
    'SystemProfile',
    'SystemsError',
    'UNKNOWN_SYSTEM',
    'find_system',
    'parse_systems',
]
