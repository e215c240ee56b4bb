"""Bucket policy granting read access to a single CloudFront distribution."""

from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct

from site_publisher.exceptions import PolicyError
from site_publisher.policy import build_bucket_policy


class SiteAccessPolicy(Construct):
  """Attaches the CloudFront-only read statement to the site bucket."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    distribution_arn: str,
  ) -> None:
    super().__init__(scope, id)

    self.document = build_bucket_policy(bucket.bucket_arn, distribution_arn)
    self.statement = iam.PolicyStatement.from_json(self.document["Statement"][0])

    result = bucket.add_to_resource_policy(self.statement)
    if not result.statement_added:
      raise PolicyError(f"Bucket policy could not be attached to {bucket.node.path}")
