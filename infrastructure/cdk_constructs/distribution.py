"""CloudFront distribution in front of the private site bucket."""

from aws_cdk import ArnFormat, Stack
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from aws_cdk import aws_s3 as s3
from constructs import Construct


class CloudFrontDistribution(Construct):
  """CloudFront distribution with a single OAC-signed S3 origin."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    default_root_object: str = "index.html",
    domain_name: str | None = None,
    certificate_arn: str | None = None,
  ) -> None:
    super().__init__(scope, id)

    self.origin_access_control = cloudfront.S3OriginAccessControl(
      self,
      "OriginAccessControl",
      description=f"OAC for {Stack.of(self).stack_name} site",
      signing=cloudfront.Signing.SIGV4_ALWAYS,
    )

    # with_bucket_defaults leaves the bucket policy alone; SiteAccessPolicy owns it
    origin = origins.S3BucketOrigin.with_bucket_defaults(
      bucket,
      origin_access_control_id=self.origin_access_control.origin_access_control_id,
    )

    certificate = None
    domain_names = None
    if domain_name and certificate_arn:
      certificate = acm.Certificate.from_certificate_arn(self, "Certificate", certificate_arn)
      domain_names = [domain_name]

    self.distribution = cloudfront.Distribution(
      self,
      "Distribution",
      default_behavior=cloudfront.BehaviorOptions(
        origin=origin,
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD,
        cached_methods=cloudfront.CachedMethods.CACHE_GET_HEAD,
        cache_policy=cloudfront.CachePolicy.CACHING_OPTIMIZED,
        compress=True,
      ),
      default_root_object=default_root_object,
      domain_names=domain_names,
      certificate=certificate,
      minimum_protocol_version=(
        cloudfront.SecurityPolicyProtocol.TLS_V1_2_2021 if certificate else None
      ),
      http_version=cloudfront.HttpVersion.HTTP2_AND_3,
      price_class=cloudfront.PriceClass.PRICE_CLASS_100,
    )

    self.distribution_arn = Stack.of(self).format_arn(
      service="cloudfront",
      region="",
      resource="distribution",
      resource_name=self.distribution.distribution_id,
      arn_format=ArnFormat.SLASH_RESOURCE_NAME,
    )
