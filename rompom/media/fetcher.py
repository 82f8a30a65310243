"""
Media asset retrieval.

Downloads selected assets into the package directory. The provider's
declared checksums cannot be trusted, so the hash of the retrieved file
is recorded on the asset and used from then on.
"""

import logging
from pathlib import Path
from typing import Optional

import httpx

from rompom.metadata.game_record import MediaAsset
from rompom.scanner.hash_calculator import calculate_hash

logger = logging.getLogger(__name__)


class AssetUnavailable(Exception):
    """A selected media asset could not be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download {url}: {reason}")


class AssetFetcher:
    """
    Downloads media assets with idempotent re-runs.

    Features:
    - Skips the transfer when an existing file matches the declared sha1
    - Writes to a temporary file and renames on success
    - Records the freshly computed sha1 as the asset's verified checksum
    """

    def __init__(self, client: httpx.Client, timeout: float = 60.0):
        """
        Initialize fetcher.

        Args:
            client: httpx.Client for HTTP requests
            timeout: Per-request timeout in seconds
        """
        self.client = client
        self.timeout = timeout

    def fetch(self, asset: MediaAsset, destination: Path, url: Optional[str] = None) -> bool:
        """
        Retrieve an asset to ``destination``.

        Args:
            asset: Asset to retrieve; its ``verified_sha1`` is updated
            destination: Target file path
            url: Override URL (defaults to the asset URL)

        Returns:
            True if a transfer happened, False if the existing file was kept

        Raises:
            AssetUnavailable: If the download or the local write fails
        """
        source = url or asset.url

        if destination.exists() and asset.declared_sha1:
            existing = calculate_hash(destination, 'sha1')
            if existing == asset.declared_sha1.lower():
                logger.debug(f"Keeping existing {destination.name} (checksum match)")
                asset.verified_sha1 = existing
                return False

        destination.parent.mkdir(parents=True, exist_ok=True)
        temp_path = destination.with_suffix(destination.suffix + '.tmp')

        try:
            with self.client.stream('GET', source, timeout=self.timeout) as response:
                if response.status_code != 200:
                    raise AssetUnavailable(source, f"HTTP {response.status_code}")
                with open(temp_path, 'wb') as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
            temp_path.replace(destination)
        except httpx.HTTPError as e:
            self._discard(temp_path)
            raise AssetUnavailable(source, str(e)) from e
        except OSError as e:
            self._discard(temp_path)
            raise AssetUnavailable(source, f"write error: {e}") from e
        except AssetUnavailable:
            self._discard(temp_path)
            raise

        asset.verified_sha1 = calculate_hash(destination, 'sha1')
        if asset.declared_sha1 and asset.verified_sha1 != asset.declared_sha1.lower():
            logger.debug(
                f"Declared sha1 for {destination.name} did not match download, "
                f"using {asset.verified_sha1}"
            )
        logger.info(f"Downloaded {destination.name}")
        return True

    @staticmethod
    def _discard(path: Path) -> None:
        if path.exists():
            path.unlink()
