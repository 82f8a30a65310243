"""
RomPom - ScreenScraper ROM Packager

Queries ScreenScraper for a single ROM, resolves one localized description
of the game and generates a PKGBUILD that installs the ROM, its media and
its description for the target system.
"""

__version__ = "0.3.0"
