"""
Package descriptor generation for rompom.

Handles package naming, per-system packaging profiles and PKGBUILD
rendering.
"""

from .name_normalizer import normalize_name
from .descriptor import PackageDescriptor
from .profiles import (
    PackagingContext,
    PackagingProfile,
    DefaultProfile,
    DiscImageProfile,
    CompressedDiscProfile,
    StandaloneLauncherProfile,
    ProfileRegistry,
    create_profile,
    default_registry,
    build_registry,
)
from .builder import ManifestBuilder, BuildResult

__all__ = [
    'normalize_name',
    'PackageDescriptor',
    'PackagingContext',
    'PackagingProfile',
    'DefaultProfile',
    'DiscImageProfile',
    'CompressedDiscProfile',
    'StandaloneLauncherProfile',
    'ProfileRegistry',
    'create_profile',
    'default_registry',
    'build_registry',
    'ManifestBuilder',
    'BuildResult',
]
