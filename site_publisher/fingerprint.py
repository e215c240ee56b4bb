"""Content fingerprints used to detect changed assets."""

import hashlib
from pathlib import Path

from .exceptions import ReadError

CHUNK_SIZE = 64 * 1024


def fingerprint_bytes(content: bytes) -> str:
  """Return the MD5 hex digest of content."""
  return hashlib.md5(content, usedforsecurity=False).hexdigest()


def fingerprint_file(path: Path | str) -> str:
  """Return the MD5 hex digest of a file's content.

  Args:
    path: File to hash

  Returns:
    32 character lowercase hex digest

  Raises:
    ReadError: If the file is missing or unreadable
  """
  digest = hashlib.md5(usedforsecurity=False)
  try:
    with open(path, "rb") as f:
      for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
        digest.update(chunk)
  except OSError as e:
    raise ReadError(f"Cannot read {path}: {e}") from e
  return digest.hexdigest()
