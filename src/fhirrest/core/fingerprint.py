"""SHA-256 fingerprints over raw bytes."""

import hashlib
from pathlib import Path

from ..utils.exceptions import FileError

_CHUNK_SIZE = 64 * 1024


def fingerprint(content: bytes) -> str:
    """
    Compute the hex SHA-256 digest of the exact bytes received.

    Never pass re-serialized JSON here, only the literal wire payload.
    """
    return hashlib.sha256(content).hexdigest()


def file_sha256(path: str | Path) -> str:
    """
    Compute the hex SHA-256 digest of a document file.

    The result is the declared file hash the host stores next to a resource.
    It is never compared with a response fingerprint.

    Raises:
        FileError: If the file cannot be opened or read
    """
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        raise FileError(str(path), str(e)) from e
    return digest.hexdigest()
