"""Cache busting for static assets.

Asset URLs get a ``v=`` query parameter: the MD5 content hash in
production, the current time in development. Hashes are kept in a JSON
manifest under the public directory.
"""

import hashlib
import json
import logging
import time
from collections.abc import Callable, Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _now_ms() -> int:
    return int(time.time() * 1000)


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def _with_version(asset_path: str, version: str) -> str:
    separator = "&" if "?" in asset_path else "?"
    return f"{asset_path}{separator}v={version}"


class CacheBuster:
    """Versioned asset URLs backed by a hash manifest.

    Example:
        >>> buster = CacheBuster(Path("public"), dev_mode=False)
        >>> buster.get_asset_url("/stylesheets/styles.css")
        '/stylesheets/styles.css?v=3f2a9c1d'
    """

    def __init__(
        self,
        public_dir: Path,
        manifest_path: Path | None = None,
        hash_length: int = 8,
        dev_mode: bool = True,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the cache buster and load any existing manifest.

        Args:
            public_dir: Directory static assets are served from
            manifest_path: Manifest file (defaults to public_dir/asset-manifest.json)
            hash_length: Number of hex characters of the hash to keep
            dev_mode: Use timestamps instead of hashes
            clock: Millisecond clock, injectable for tests
        """
        self.public_dir = public_dir
        self.manifest_path = manifest_path or public_dir / "asset-manifest.json"
        self.hash_length = hash_length
        self.dev_mode = dev_mode
        self.clock = clock
        self.manifest: dict[str, str] = {}

        self.load_manifest()

    def load_manifest(self) -> None:
        """Load the manifest; a missing or corrupt file leaves it empty."""
        if not self.manifest_path.exists():
            self.manifest = {}
            return

        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load asset manifest: %s", e)
            self.manifest = {}
            return

        self.manifest = {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def save_manifest(self) -> None:
        """Write the manifest. Failures are logged, not raised."""
        try:
            self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
            self.manifest_path.write_text(json.dumps(self.manifest, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("Could not save asset manifest: %s", e)

    def generate_hash(self, file_path: Path) -> str:
        """Short MD5 of the file contents, or a base-36 timestamp if unreadable."""
        try:
            digest = hashlib.md5(file_path.read_bytes()).hexdigest()
        except OSError as e:
            logger.error("Could not generate hash for %s: %s", file_path, e)
            return to_base36(self.clock())
        return digest[: self.hash_length]

    def get_asset_url(self, asset_path: str) -> str:
        """Return ``asset_path`` with a cache-busting version parameter."""
        if self.dev_mode:
            return _with_version(asset_path, str(self.clock()))

        normalized = asset_path.lstrip("/")
        if normalized in self.manifest:
            return _with_version(asset_path, self.manifest[normalized])

        full_path = self.public_dir / normalized
        if full_path.is_file():
            file_hash = self.generate_hash(full_path)
            self.manifest[normalized] = file_hash
            self.save_manifest()
            return _with_version(asset_path, file_hash)

        return _with_version(asset_path, str(self.clock()))

    def generate_manifest(self, asset_paths: Iterable[str]) -> dict[str, str]:
        """Hash the given assets and save the manifest.

        Missing assets are skipped with a warning.

        Returns:
            The updated manifest
        """
        for asset_path in asset_paths:
            normalized = asset_path.lstrip("/")
            full_path = self.public_dir / normalized
            if full_path.is_file():
                self.manifest[normalized] = self.generate_hash(full_path)
                logger.info("%s -> %s", normalized, self.manifest[normalized])
            else:
                logger.warning("Asset not found: %s", normalized)

        self.save_manifest()
        return dict(self.manifest)

    def clear_manifest(self) -> None:
        """Forget all hashes and delete the manifest file."""
        self.manifest = {}
        if self.manifest_path.exists():
            self.manifest_path.unlink()
