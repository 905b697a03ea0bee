"""MD5 checks for downloaded BIOS packages against catalog hashes."""

import hashlib
import logging
import re
from pathlib import Path

from bios_updater.errors import IntegrityError

MD5_PATTERN = re.compile(r"^[a-fA-F0-9]{32}$")

logger = logging.getLogger("bios_updater.verification")


def compute_md5(file_path: Path, chunk_size: int = 8192) -> str:
    """Compute MD5 hash of a file.

    Args:
        file_path: Path to file to hash
        chunk_size: Read buffer size

    Returns:
        32-character lowercase hex MD5 hash

    Raises:
        FileNotFoundError: If file doesn't exist
        OSError: If file read fails
    """
    md5_hash = hashlib.md5()

    with open(file_path, "rb") as f:
        while chunk := f.read(chunk_size):
            md5_hash.update(chunk)

    result = md5_hash.hexdigest()
    logger.debug(f"Computed MD5 for {file_path.name}: {result}")
    return result


def verify_md5(file_path: Path, expected_md5: str) -> bool:
    """Check a file against the catalog's hashMD5 attribute.

    Raises:
        ValueError: If expected_md5 is not a 32-char hex string
    """
    if not isinstance(expected_md5, str) or not MD5_PATTERN.match(expected_md5):
        raise ValueError(f"Invalid MD5 format: {expected_md5} (must be 32-char hex)")

    actual_md5 = compute_md5(file_path)
    match = actual_md5 == expected_md5.lower()
    if match:
        logger.info(f"MD5 verification passed for {file_path.name}")
    else:
        logger.error(
            f"MD5 mismatch for {file_path.name}: "
            f"expected {expected_md5.lower()}, got {actual_md5}"
        )
    return match


def verify_md5_or_raise(file_path: Path, expected_md5: str) -> None:
    """Verify file MD5 hash.

    Raises:
        IntegrityError: If the hash does not match or the catalog hash is malformed
    """
    try:
        matched = verify_md5(file_path, expected_md5)
    except ValueError as e:
        raise IntegrityError(str(e)) from e

    if not matched:
        raise IntegrityError(
            f"expected {expected_md5.lower()}, got {compute_md5(file_path)}"
        )
