"""TLS asset packaging.

This module reads the cluster TLS assets from disk and compacts them into
gzip-compressed, base64 encoded strings that can be embedded in cloud-config
user-data and stack templates.
"""

import base64
import binascii
import gzip
import zlib
from pathlib import Path

from kube_stack.exceptions import CompactionError
from kube_stack.logging_config import get_logger
from kube_stack.models.assets import ASSET_FILES, CompactAssetBundle, SecurityAssetBundle

logger = get_logger(__name__)


def compress_data(data: bytes) -> str:
    """Gzip and base64 encode data.

    The gzip header timestamp is fixed so equal input gives equal output.

    Args:
        data: Raw bytes to compress

    Returns:
        ASCII base64 string of the gzip stream
    """
    return base64.b64encode(gzip.compress(data, mtime=0)).decode("ascii")


def decompress_data(encoded: str) -> bytes:
    """Reverse :func:`compress_data`.

    Raises:
        ValueError: If the input is not base64 encoded gzip data
    """
    try:
        return gzip.decompress(base64.b64decode(encoded, validate=True))
    except (binascii.Error, OSError, EOFError, zlib.error) as e:
        raise ValueError(f"not a compressed asset: {e}") from e


def read_asset_bundle(directory: str | Path) -> SecurityAssetBundle:
    """Read the TLS assets from a directory.

    Args:
        directory: Directory containing the asset files listed in ASSET_FILES

    Returns:
        SecurityAssetBundle with the raw file contents

    Raises:
        CompactionError: If an asset file is missing or unreadable
    """
    directory = Path(directory)
    logger.debug(f"Reading TLS assets from: {directory}")

    contents = {}
    for name, filename in ASSET_FILES.items():
        path = directory / filename
        try:
            contents[name] = path.read_bytes()
        except FileNotFoundError:
            logger.error(f"TLS asset not found: {path}")
            raise CompactionError(
                f"TLS asset not found: {path}",
                f"Expected files in {directory.absolute()}: {', '.join(ASSET_FILES.values())}",
            )
        except OSError as e:
            logger.error(f"Failed to read TLS asset {path}: {e}")
            raise CompactionError(f"Failed to read TLS asset {path}: {e}")

    return SecurityAssetBundle(**contents)


def compact(bundle: SecurityAssetBundle) -> CompactAssetBundle:
    """Compress and encode every asset in a bundle.

    Raises:
        CompactionError: If an asset cannot be compressed
    """
    encoded = {}
    for name, data in bundle.items():
        try:
            encoded[name] = compress_data(data)
        except (TypeError, ValueError, OSError, zlib.error) as e:
            raise CompactionError(f"Failed to compress TLS asset '{name}': {e}") from e

    compacted = CompactAssetBundle(**encoded)
    logger.debug(f"Compacted {len(encoded)} TLS assets into {compacted.encoded_size} bytes")
    return compacted


def decompact(compacted: CompactAssetBundle) -> SecurityAssetBundle:
    """Decode and decompress every asset in a compacted bundle.

    Raises:
        CompactionError: If an asset is not valid compressed data
    """
    contents = {}
    for name, encoded in compacted.items():
        try:
            contents[name] = decompress_data(encoded)
        except ValueError as e:
            raise CompactionError(f"Failed to decompress TLS asset '{name}': {e}") from e

    return SecurityAssetBundle(**contents)
