"""Private S3 bucket holding static site content."""

from aws_cdk import RemovalPolicy
from aws_cdk import aws_s3 as s3
from constructs import Construct


class StorageBucket(Construct):
  """S3 bucket readable only through CloudFront.

  All four public access block flags are set and object ownership is
  enforced by the bucket owner, so ACL grants cannot make objects public.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket_name: str | None = None,
    removal_policy: RemovalPolicy = RemovalPolicy.RETAIN,
  ) -> None:
    super().__init__(scope, id)

    self.bucket = s3.Bucket(
      self,
      "Bucket",
      bucket_name=bucket_name,
      public_read_access=False,
      block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
      object_ownership=s3.ObjectOwnership.BUCKET_OWNER_ENFORCED,
      encryption=s3.BucketEncryption.S3_MANAGED,
      removal_policy=removal_policy,
      auto_delete_objects=removal_policy == RemovalPolicy.DESTROY,
    )
