"""CloudFront cache invalidation driven by fingerprint changes."""

import logging
import time
import urllib.parse
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

from botocore.exceptions import ClientError, WaiterError

from .assets import HTML_EXTENSIONS
from .exceptions import InvalidationError

logger = logging.getLogger(__name__)


@dataclass
class InvalidationRequest:
  """A single invalidation issued for one convergence run."""

  paths: list[str]
  trigger_fingerprints: dict[str, str | None] = field(default_factory=dict)
  invalidation_id: str | None = None
  status: str | None = None


def changed_keys(previous: dict[str, str], current: dict[str, str]) -> dict[str, str | None]:
  """Keys added, removed or changed between two fingerprint sets.

  Returns:
    Mapping of key to its current fingerprint, None for removed keys
  """
  changes: dict[str, str | None] = {}
  for key in sorted(previous.keys() | current.keys()):
    if previous.get(key) != current.get(key):
      changes[key] = current.get(key)
  return changes


def path_scope(key: str) -> str:
  """Invalidation path covering an object key.

  HTML documents and top-level files are invalidated individually; anything
  in a sub-directory is covered by a wildcard on its top-level directory.
  Paths are percent-encoded the way CloudFront expects them.
  """
  path = PurePosixPath(key)
  if path.suffix.lower() in HTML_EXTENSIONS or len(path.parts) == 1:
    return "/" + _quote(key)
  return "/" + _quote(path.parts[0]) + "/*"


def _quote(key: str) -> str:
  return urllib.parse.quote(key, safe="/-_.~")


def invalidation_paths(previous: dict[str, str], current: dict[str, str]) -> list[str]:
  """Sorted, de-duplicated path scopes affected by a fingerprint change."""
  return sorted({path_scope(key) for key in changed_keys(previous, current)})


class CacheInvalidator:
  """Issues invalidations against a single CloudFront distribution."""

  def __init__(self, distribution_id: str, cloudfront_client: Any) -> None:
    self.distribution_id = distribution_id
    self.cloudfront = cloudfront_client

  def invalidate(
    self,
    previous: dict[str, str],
    current: dict[str, str],
    *,
    replaced: Iterable[str] = (),
  ) -> InvalidationRequest | None:
    """Invalidate every path scope whose fingerprints changed.

    At most one CreateInvalidation call is made. The call does not wait for
    the edge caches to finish purging.

    Args:
      previous: Fingerprints recorded by the last successful run
      current: Fingerprints of the local assets
      replaced: Keys written or deleted in the bucket during this run, which
        are invalidated even when the recorded fingerprints did not change

    Returns:
      The issued request, or None when nothing changed

    Raises:
      InvalidationError: If CloudFront rejects or throttles the request
    """
    changes = changed_keys(previous, current)
    for key in replaced:
      changes.setdefault(key, current.get(key))
    changes = dict(sorted(changes.items()))
    if not changes:
      logger.debug("No fingerprint changes, skipping invalidation")
      return None

    request = InvalidationRequest(
      paths=sorted({path_scope(key) for key in changes}),
      trigger_fingerprints=changes,
    )

    try:
      response = self.cloudfront.create_invalidation(
        DistributionId=self.distribution_id,
        InvalidationBatch={
          "Paths": {"Quantity": len(request.paths), "Items": request.paths},
          "CallerReference": str(time.time()),
        },
      )
    except ClientError as e:
      raise InvalidationError(
        f"Invalidation of {', '.join(request.paths)} on {self.distribution_id} failed: {e}"
      ) from e

    invalidation = response["Invalidation"]
    request.invalidation_id = invalidation["Id"]
    request.status = invalidation.get("Status")
    logger.info(
      "Created invalidation %s for %s", request.invalidation_id, ", ".join(request.paths)
    )
    return request

  def wait(self, invalidation_id: str, *, delay: int = 20, max_attempts: int = 30) -> None:
    """Block until an invalidation has completed on every edge location.

    Raises:
      InvalidationError: If the invalidation does not complete in time
    """
    waiter = self.cloudfront.get_waiter("invalidation_completed")
    try:
      waiter.wait(
        DistributionId=self.distribution_id,
        Id=invalidation_id,
        WaiterConfig={"Delay": delay, "MaxAttempts": max_attempts},
      )
    except WaiterError as e:
      raise InvalidationError(f"Invalidation {invalidation_id} did not complete: {e}") from e
    logger.info("Invalidation %s completed", invalidation_id)
