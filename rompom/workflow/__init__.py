"""
Packaging workflow for rompom.
"""

from .packager import Packager, PackageRequest, PackageResult, WriteFailed, write_outputs

__all__ = ['Packager', 'PackageRequest', 'PackageResult', 'WriteFailed', 'write_outputs']
