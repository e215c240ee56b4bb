"""Publish static site content to S3 and keep CloudFront caches fresh."""

from .assets import Asset, PublishedObject, discover_assets, load_asset
from .converge import ConvergenceResult, converge
from .delivery import DeliveryConfiguration, resolve_delivery
from .desired_state import DesiredState
from .exceptions import (
  DeliveryError,
  InvalidationError,
  PolicyError,
  PublishError,
  ReadError,
  SitePublisherError,
  StateWriteError,
)
from .fingerprint import fingerprint_bytes, fingerprint_file
from .invalidator import CacheInvalidator, InvalidationRequest, invalidation_paths
from .policy import build_bucket_policy, validate_bucket_policy, verify_access
from .publisher import PublishReport, StoragePublisher
from .state import ConvergenceState, StateStore

__all__ = [
  "Asset",
  "CacheInvalidator",
  "ConvergenceResult",
  "ConvergenceState",
  "DeliveryConfiguration",
  "DeliveryError",
  "DesiredState",
  "InvalidationError",
  "InvalidationRequest",
  "PolicyError",
  "PublishError",
  "PublishReport",
  "PublishedObject",
  "ReadError",
  "SitePublisherError",
  "StateStore",
  "StateWriteError",
  "StoragePublisher",
  "build_bucket_policy",
  "converge",
  "discover_assets",
  "fingerprint_bytes",
  "fingerprint_file",
  "invalidation_paths",
  "load_asset",
  "resolve_delivery",
  "validate_bucket_policy",
  "verify_access",
]
