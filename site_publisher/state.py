"""Fingerprint set recorded by the previous convergence run."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import ReadError, StateWriteError

logger = logging.getLogger(__name__)


@dataclass
class ConvergenceState:
  """Fingerprints keyed by object key, as of the last successful run."""

  fingerprints: dict[str, str] = field(default_factory=dict)

  def to_dict(self) -> dict[str, dict[str, str]]:
    return {"fingerprints": dict(sorted(self.fingerprints.items()))}


class StateStore:
  """JSON file holding the ConvergenceState for one site."""

  def __init__(self, path: Path | str) -> None:
    self.path = Path(path)

  def load(self) -> ConvergenceState:
    """Load the previous state, or an empty one on the first run.

    Raises:
      ReadError: If the file exists but is unreadable or malformed
    """
    if not self.path.exists():
      logger.debug("No previous state at %s", self.path)
      return ConvergenceState()

    try:
      with open(self.path) as f:
        data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
      raise ReadError(f"Cannot read state file {self.path}: {e}") from e

    fingerprints = data.get("fingerprints") if isinstance(data, dict) else None
    if not isinstance(fingerprints, dict):
      raise ReadError(f"State file {self.path} has no fingerprints mapping")
    return ConvergenceState(fingerprints={str(k): str(v) for k, v in fingerprints.items()})

  def save(self, state: ConvergenceState) -> None:
    """Write state atomically next to the target file.

    Raises:
      StateWriteError: If the directory or file cannot be written
    """
    tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
    try:
      self.path.parent.mkdir(parents=True, exist_ok=True)
      with open(tmp_path, "w") as f:
        json.dump(state.to_dict(), f, indent=2)
        f.write("\n")
      tmp_path.replace(self.path)
    except OSError as e:
      raise StateWriteError(f"Cannot write state file {self.path}: {e}") from e
    logger.debug("Saved %d fingerprints to %s", len(state.fingerprints), self.path)
