"""
Media type definitions for rompom.

Maps logical media kinds to the ScreenScraper media types that can
satisfy them, and to the file names used inside a package.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class MediaKind(Enum):
    """
    Logical media kinds, in manifest order.

    Values are the artifact base names used inside the package.
    """
    VIDEO = 'video'
    BEZEL = 'bezel'
    TITLESCREEN = 'titlescreen'
    COVER = 'cover'
    MARQUEE = 'marquee'
    SCREENSHOT = 'screenshot'
    WHEEL = 'wheel'
    MANUAL = 'manual'


@dataclass(frozen=True)
class MediaDefinition:
    """
    How one logical kind is selected, named and retrieved.

    Attributes:
        kind: Logical media kind
        upstream_types: Acceptable ScreenScraper types, preferred first
        tag: Element name in description.xml
        extension: Fixed file extension, or None to use the asset's format
        remote_name: Template for the file name on the media server.
            ``{region}`` and ``{format}`` are substituted.
        region_from_url: Take the region from the URL's ``media=``
            parameter instead of the declared region
    """
    kind: MediaKind
    upstream_types: Tuple[str, ...]
    tag: str
    remote_name: str
    extension: Optional[str] = None
    region_from_url: bool = False

    def artifact_name(self, media_format: str) -> str:
        """File name of the asset inside the package (e.g., 'cover.png')."""
        return f"{self.kind.value}.{self.extension or media_format}"


# ScreenScraper's declared region is unreliable for title screens, boxes,
# wheels and manuals: it can say 'us' while the URL serves 'wor'.
MEDIA_DEFINITIONS: Tuple[MediaDefinition, ...] = (
    MediaDefinition(
        kind=MediaKind.VIDEO,
        upstream_types=('video-normalized', 'video'),
        tag='video',
        remote_name='video.mp4',
        extension='mp4',
    ),
    MediaDefinition(
        kind=MediaKind.BEZEL,
        upstream_types=('bezel-16-9',),
        tag='bezel',
        remote_name='bezel-16-9({region}).{format}',
    ),
    MediaDefinition(
        kind=MediaKind.TITLESCREEN,
        upstream_types=('sstitle',),
        tag='thumbnail',
        remote_name='{region}.{format}',
        region_from_url=True,
    ),
    MediaDefinition(
        kind=MediaKind.COVER,
        upstream_types=('box-2D',),
        tag='image',
        remote_name='{region}.{format}',
        region_from_url=True,
    ),
    MediaDefinition(
        kind=MediaKind.MARQUEE,
        upstream_types=('marquee',),
        tag='marquee',
        remote_name='marquee.{format}',
    ),
    MediaDefinition(
        kind=MediaKind.SCREENSHOT,
        upstream_types=('ss',),
        tag='screenshot',
        remote_name='ss({region}).{format}',
    ),
    MediaDefinition(
        kind=MediaKind.WHEEL,
        upstream_types=('wheel',),
        tag='wheel',
        remote_name='{region}.{format}',
        region_from_url=True,
    ),
    MediaDefinition(
        kind=MediaKind.MANUAL,
        upstream_types=('manuel',),
        tag='manual',
        remote_name='{region}.pdf',
        extension='pdf',
        region_from_url=True,
    ),
)

MEDIA_DEFINITION_MAP: Dict[MediaKind, MediaDefinition] = {
    definition.kind: definition for definition in MEDIA_DEFINITIONS
}

# Order of media tags in description.xml
DESCRIPTION_TAGS: List[str] = [
    'image', 'thumbnail', 'video', 'marquee', 'screenshot', 'wheel', 'manual', 'bezel'
]


def get_definition(kind: MediaKind) -> MediaDefinition:
    """
    Get the definition for a logical media kind.

    Raises:
        ValueError: If the kind has no definition
    """
    if kind not in MEDIA_DEFINITION_MAP:
        raise ValueError(f"Unsupported media kind: {kind}")
    return MEDIA_DEFINITION_MAP[kind]


def parse_media_kinds(names: List[str]) -> List[MediaKind]:
    """
    Convert configured kind names (e.g., ['cover', 'video']) to MediaKinds.

    Unknown names are ignored; the result keeps manifest order.
    """
    wanted = {name.lower() for name in names}
    return [kind for kind in MediaKind if kind.value in wanted]
