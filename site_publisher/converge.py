"""Bring a site bucket and its edge cache in line with a DesiredState."""

import logging
from dataclasses import dataclass, field
from typing import Any

from .assets import PublishedObject
from .desired_state import DesiredState
from .exceptions import InvalidationError
from .invalidator import CacheInvalidator, InvalidationRequest
from .policy import verify_access
from .publisher import DEFAULT_CACHE_CONTROL, StoragePublisher
from .state import ConvergenceState, StateStore

logger = logging.getLogger(__name__)


@dataclass
class ConvergenceResult:
  """What a convergence run changed."""

  uploaded: list[PublishedObject] = field(default_factory=list)
  unchanged: list[str] = field(default_factory=list)
  deleted: list[str] = field(default_factory=list)
  invalidation: InvalidationRequest | None = None
  invalidation_error: str | None = None

  @property
  def mutations(self) -> int:
    """Number of remote writes made during the run."""
    return len(self.uploaded) + len(self.deleted) + (1 if self.invalidation else 0)

  @property
  def changed(self) -> bool:
    return self.mutations > 0


def converge(
  desired: DesiredState,
  *,
  s3_client: Any,
  cloudfront_client: Any,
  state_store: StateStore,
  prune: bool = False,
  verify_policy: bool = True,
  wait_for_invalidation: bool = False,
  cache_control: str = DEFAULT_CACHE_CONTROL,
) -> ConvergenceResult:
  """Publish changed assets and invalidate their cached copies.

  Running twice without local changes makes no remote writes the second time.

  Args:
    desired: Assets and delivery target to converge to
    s3_client: boto3 S3 client
    cloudfront_client: boto3 CloudFront client
    state_store: Where the previous run's fingerprints are kept
    prune: Delete objects that were published before but no longer exist locally
    verify_policy: Check public access and bucket policy before publishing
    wait_for_invalidation: Block until the invalidation has completed
    cache_control: Cache-Control header set on uploaded objects

  Returns:
    ConvergenceResult describing the changes made

  Raises:
    ReadError: If the previous state cannot be read
    PolicyError: If the bucket is not locked down to the distribution
    PublishError: If an upload or delete fails
    StateWriteError: If the new state cannot be saved
  """
  delivery = desired.delivery
  previous = state_store.load()
  current = desired.fingerprints

  if verify_policy:
    verify_access(s3_client, delivery.bucket_name, delivery.arn)

  publisher = StoragePublisher(delivery.bucket_name, s3_client, cache_control=cache_control)
  report = publisher.publish_all(list(desired.assets))
  result = ConvergenceResult(uploaded=report.uploaded, unchanged=report.unchanged)

  if prune:
    stale = sorted(previous.fingerprints.keys() - current.keys())
    result.deleted = publisher.delete_stale(stale)

  invalidator = CacheInvalidator(delivery.distribution_id, cloudfront_client)
  try:
    result.invalidation = invalidator.invalidate(
      previous.fingerprints,
      current,
      replaced=report.uploaded_keys + result.deleted,
    )
  except InvalidationError as e:
    # Keep the old fingerprints so the next run retries the invalidation.
    logger.warning("Cache may serve stale content until the next run: %s", e)
    result.invalidation_error = str(e)
    return result

  if result.invalidation and result.invalidation.invalidation_id and wait_for_invalidation:
    try:
      invalidator.wait(result.invalidation.invalidation_id)
    except InvalidationError as e:
      logger.warning("%s", e)
      result.invalidation_error = str(e)

  if current != previous.fingerprints:
    state_store.save(ConvergenceState(fingerprints=current))

  logger.info(
    "Converged %s: %d uploaded, %d unchanged, %d deleted",
    desired.site_name,
    len(result.uploaded),
    len(result.unchanged),
    len(result.deleted),
  )
  return result
