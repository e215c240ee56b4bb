"""Upload site assets to S3, skipping objects whose fingerprint already matches."""

import logging
from dataclasses import dataclass, field
from typing import Any

from botocore.exceptions import ClientError

from .assets import Asset, PublishedObject
from .exceptions import PublishError

logger = logging.getLogger(__name__)

FINGERPRINT_METADATA_KEY = "fingerprint"
DEFAULT_CACHE_CONTROL = "public, max-age=300"
NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
DELETE_BATCH_SIZE = 1000


@dataclass
class PublishReport:
  """Outcome of publishing a set of assets."""

  uploaded: list[PublishedObject] = field(default_factory=list)
  unchanged: list[str] = field(default_factory=list)

  @property
  def uploaded_keys(self) -> list[str]:
    return [obj.key for obj in self.uploaded]


class StoragePublisher:
  """Publishes assets into a private S3 bucket."""

  def __init__(
    self,
    bucket: str,
    s3_client: Any,
    *,
    cache_control: str = DEFAULT_CACHE_CONTROL,
  ) -> None:
    self.bucket = bucket
    self.s3 = s3_client
    self.cache_control = cache_control

  def published_fingerprint(self, key: str) -> str | None:
    """Return the fingerprint recorded on the published object, if any.

    Raises:
      PublishError: If S3 fails for any reason other than a missing object
    """
    try:
      response = self.s3.head_object(Bucket=self.bucket, Key=key)
    except ClientError as e:
      if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
        return None
      raise PublishError(f"Cannot inspect s3://{self.bucket}/{key}: {e}", key=key) from e

    metadata: dict[str, str] = response.get("Metadata", {})
    return metadata.get(FINGERPRINT_METADATA_KEY)

  def publish(self, asset: Asset) -> PublishedObject | None:
    """Upload an asset unless the bucket already holds the same fingerprint.

    Returns:
      The PublishedObject when an upload happened, None when unchanged
    """
    if self.published_fingerprint(asset.key) == asset.fingerprint:
      logger.debug("Unchanged: %s", asset.key)
      return None

    try:
      self.s3.put_object(
        Bucket=self.bucket,
        Key=asset.key,
        Body=asset.content,
        ContentType=asset.media_type,
        CacheControl=self.cache_control,
        Metadata={FINGERPRINT_METADATA_KEY: asset.fingerprint},
      )
    except ClientError as e:
      raise PublishError(
        f"Upload of s3://{self.bucket}/{asset.key} failed: {e}", key=asset.key
      ) from e

    logger.info("Uploaded %s (%s)", asset.key, asset.fingerprint)
    return PublishedObject(key=asset.key, fingerprint=asset.fingerprint)

  def publish_all(self, assets: list[Asset]) -> PublishReport:
    """Publish assets in order.

    A failure stops the run and reports which keys were already uploaded;
    rerunning is safe since unchanged objects are skipped by fingerprint.

    Raises:
      PublishError: On the first object that fails
    """
    report = PublishReport()
    for asset in assets:
      try:
        published = self.publish(asset)
      except PublishError as e:
        e.uploaded = report.uploaded_keys
        raise
      if published is None:
        report.unchanged.append(asset.key)
      else:
        report.uploaded.append(published)
    return report

  def delete_stale(self, keys: list[str]) -> list[str]:
    """Delete objects that no longer exist locally.

    Returns:
      The keys that were deleted
    """
    if not keys:
      return []

    deleted: list[str] = []
    for start in range(0, len(keys), DELETE_BATCH_SIZE):
      batch = keys[start : start + DELETE_BATCH_SIZE]
      try:
        response = self.s3.delete_objects(
          Bucket=self.bucket,
          Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
        )
      except ClientError as e:
        raise PublishError(f"Delete from s3://{self.bucket} failed: {e}") from e

      errors = response.get("Errors", [])
      if errors:
        first = errors[0]
        raise PublishError(
          f"Delete of s3://{self.bucket}/{first.get('Key')} failed: {first.get('Message')}",
          key=first.get("Key"),
        )
      deleted.extend(batch)

    for key in deleted:
      logger.info("Deleted %s", key)
    return deleted
