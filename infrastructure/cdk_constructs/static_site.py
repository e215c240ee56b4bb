"""Main composite construct for complete static website infrastructure."""

from aws_cdk import CfnOutput, RemovalPolicy
from constructs import Construct

from .access_policy import SiteAccessPolicy
from .distribution import CloudFrontDistribution
from .storage import StorageBucket


class StaticSiteConstruct(Construct):
  """Complete static website infrastructure.

  Creates:
  - Private S3 bucket with all public access blocked
  - CloudFront distribution with an Origin Access Control signed S3 origin
  - Bucket policy letting only that distribution read objects
  - Stack outputs consumed by scripts/publish_site.py

  Content is published separately, see site_publisher.converge.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket_name: str | None = None,
    domain_name: str | None = None,
    certificate_arn: str | None = None,
    default_root_object: str = "index.html",
    removal_policy: RemovalPolicy = RemovalPolicy.RETAIN,
  ) -> None:
    super().__init__(scope, id)

    self.bucket = StorageBucket(
      self,
      "Storage",
      bucket_name=bucket_name,
      removal_policy=removal_policy,
    )

    self.distribution = CloudFrontDistribution(
      self,
      "Delivery",
      bucket=self.bucket.bucket,
      default_root_object=default_root_object,
      domain_name=domain_name,
      certificate_arn=certificate_arn,
    )

    self.access_policy = SiteAccessPolicy(
      self,
      "AccessPolicy",
      bucket=self.bucket.bucket,
      distribution_arn=self.distribution.distribution_arn,
    )

    # Outputs, with fixed logical IDs so resolve_delivery can find them
    outputs = {
      "BucketName": (self.bucket.bucket.bucket_name, "S3 bucket name"),
      "DistributionId": (
        self.distribution.distribution.distribution_id,
        "CloudFront distribution ID",
      ),
      "DistributionDomainName": (
        self.distribution.distribution.distribution_domain_name,
        "CloudFront distribution domain name",
      ),
      "DistributionArn": (self.distribution.distribution_arn, "CloudFront distribution ARN"),
    }
    for name, (value, description) in outputs.items():
      output = CfnOutput(self, name, value=value, description=description)
      output.override_logical_id(name)
