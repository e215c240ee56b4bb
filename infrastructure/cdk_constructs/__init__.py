"""CDK constructs for static website infrastructure."""

from .access_policy import SiteAccessPolicy
from .distribution import CloudFrontDistribution
from .static_site import StaticSiteConstruct
from .storage import StorageBucket

__all__ = [
  "CloudFrontDistribution",
  "SiteAccessPolicy",
  "StaticSiteConstruct",
  "StorageBucket",
]
