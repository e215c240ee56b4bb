"""Errors raised while publishing a static site."""


class SitePublisherError(Exception):
  """Base class for all site publishing errors."""


class ReadError(SitePublisherError):
  """A local asset, content directory or state file could not be read."""


class PublishError(SitePublisherError):
  """An object could not be uploaded to, inspected in or deleted from S3."""

  def __init__(
    self, message: str, *, key: str | None = None, uploaded: list[str] | None = None
  ) -> None:
    super().__init__(message)
    self.key = key
    self.uploaded = uploaded or []


class PolicyError(SitePublisherError):
  """Bucket access is not locked down to the site's distribution."""


class DeliveryError(SitePublisherError):
  """The CloudFront distribution for a site could not be resolved."""


class InvalidationError(SitePublisherError):
  """CloudFront rejected or throttled an invalidation request."""


class StateWriteError(SitePublisherError):
  """The convergence state file could not be written."""
