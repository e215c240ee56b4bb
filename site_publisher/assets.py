"""Local site assets and their published counterparts."""

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import ReadError
from .fingerprint import fingerprint_bytes

HTML_EXTENSIONS = {".html", ".htm"}
DEFAULT_MEDIA_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class Asset:
  """A local file that should exist in the site bucket."""

  key: str
  content: bytes = field(repr=False)
  fingerprint: str
  media_type: str

  @property
  def is_document(self) -> bool:
    return Path(self.key).suffix.lower() in HTML_EXTENSIONS


@dataclass(frozen=True)
class PublishedObject:
  """An object written to the site bucket from an Asset."""

  key: str
  fingerprint: str
  visibility: str = "private"


def guess_media_type(key: str) -> str:
  """Guess the Content-Type for an object key."""
  media_type, _ = mimetypes.guess_type(key)
  if media_type is None:
    return DEFAULT_MEDIA_TYPE
  if media_type.startswith("text/"):
    return f"{media_type}; charset=utf-8"
  return media_type


def load_asset(path: Path, root: Path) -> Asset:
  """Read a file below root into an Asset.

  Raises:
    ReadError: If the file cannot be read
  """
  try:
    content = path.read_bytes()
  except OSError as e:
    raise ReadError(f"Cannot read asset {path}: {e}") from e

  key = path.relative_to(root).as_posix()
  return Asset(
    key=key,
    content=content,
    fingerprint=fingerprint_bytes(content),
    media_type=guess_media_type(key),
  )


def _is_hidden(path: Path, root: Path) -> bool:
  return any(part.startswith(".") for part in path.relative_to(root).parts)


def discover_assets(content_dir: Path | str) -> list[Asset]:
  """Load every file in a site directory, sorted by key.

  Dotfiles and anything inside dot-directories are skipped.

  Args:
    content_dir: Directory holding the site (index.html, images/, ...)

  Returns:
    Assets sorted by key

  Raises:
    ReadError: If the directory is missing, unreadable or has no HTML document
  """
  root = Path(content_dir)
  if not root.is_dir():
    raise ReadError(f"Content directory not found: {root}")

  try:
    paths = sorted(p for p in root.rglob("*") if p.is_file() and not _is_hidden(p, root))
  except OSError as e:
    raise ReadError(f"Cannot list {root}: {e}") from e

  assets = [load_asset(p, root) for p in paths]
  if not any(a.is_document for a in assets):
    raise ReadError(f"No HTML document found in {root}")
  return sorted(assets, key=lambda a: a.key)
