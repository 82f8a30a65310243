"""ROM file inspection helpers."""

from .hash_calculator import calculate_hash, hash_bytes
from .cue_parser import CueError, parse_cue

__all__ = ['calculate_hash', 'hash_bytes', 'CueError', 'parse_cue']
