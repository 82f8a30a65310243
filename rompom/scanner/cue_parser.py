"""Cue sheet parsing."""

import re
from pathlib import Path
from typing import List


class CueError(Exception):
    """Cue sheet parsing errors."""
    pass


# FILE "Game (Track 1).bin" BINARY  /  FILE game.bin BINARY
_FILE_LINE = re.compile(r'^\s*FILE\s+(?:"([^"]+)"|(\S+))', re.IGNORECASE)


def parse_cue(cue_path: Path) -> List[Path]:
    """
    Parse a cue sheet and extract the track files it references.

    Args:
        cue_path: Path to .cue file

    Returns:
        Paths of the referenced track files, in cue order, resolved
        against the cue sheet's directory

    Raises:
        CueError: If the cue sheet cannot be read
    """
    if not cue_path.is_file():
        raise CueError(f"Cue sheet not found: {cue_path}")

    tracks = []
    cue_dir = cue_path.parent

    try:
        with open(cue_path, 'r', encoding='utf-8', errors='ignore') as f:
            for line in f:
                match = _FILE_LINE.match(line)
                if not match:
                    continue
                track = Path(match.group(1) or match.group(2))
                if not track.is_absolute():
                    track = cue_dir / track
                if track not in tracks:
                    tracks.append(track)
    except OSError as e:
        raise CueError(f"Failed to read cue sheet: {e}")

    return tracks
