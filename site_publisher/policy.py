"""Bucket policy that lets only the site's CloudFront distribution read objects."""

import json
from typing import Any

from botocore.exceptions import ClientError

from .exceptions import PolicyError

POLICY_VERSION = "2012-10-17"
STATEMENT_SID = "AllowCloudFrontServicePrincipalReadOnly"
CLOUDFRONT_SERVICE_PRINCIPAL = "cloudfront.amazonaws.com"
READ_ACTION = "s3:GetObject"
SOURCE_ARN_CONDITION_KEY = "AWS:SourceArn"

PUBLIC_ACCESS_BLOCK_FLAGS = (
  "BlockPublicAcls",
  "IgnorePublicAcls",
  "BlockPublicPolicy",
  "RestrictPublicBuckets",
)


def build_bucket_policy(bucket_arn: str, distribution_arn: str) -> dict[str, Any]:
  """Build a policy granting s3:GetObject to one CloudFront distribution.

  The SourceArn condition keeps other distributions, including ones in
  other accounts, from reading through the same service principal.
  """
  document = {
    "Version": POLICY_VERSION,
    "Statement": [
      {
        "Sid": STATEMENT_SID,
        "Effect": "Allow",
        "Principal": {"Service": CLOUDFRONT_SERVICE_PRINCIPAL},
        "Action": READ_ACTION,
        "Resource": f"{bucket_arn}/*",
        "Condition": {"StringEquals": {SOURCE_ARN_CONDITION_KEY: distribution_arn}},
      }
    ],
  }
  validate_bucket_policy(document)
  return document


def validate_bucket_policy(document: dict[str, Any]) -> None:
  """Check the shape of a site bucket policy.

  Raises:
    PolicyError: If the document is not a single, fully populated allow statement
  """
  statements = document.get("Statement")
  if not isinstance(statements, list) or len(statements) != 1:
    raise PolicyError("Bucket policy must contain exactly one statement")

  statement = statements[0]
  if statement.get("Effect") != "Allow":
    raise PolicyError("Bucket policy statement must be an Allow")
  if statement.get("Principal", {}).get("Service") != CLOUDFRONT_SERVICE_PRINCIPAL:
    raise PolicyError(f"Bucket policy principal must be {CLOUDFRONT_SERVICE_PRINCIPAL}")
  if statement.get("Action") != READ_ACTION:
    raise PolicyError(f"Bucket policy action must be {READ_ACTION}")

  resource = statement.get("Resource")
  if not isinstance(resource, str) or not resource.endswith("/*") or resource == "/*":
    raise PolicyError("Bucket policy resource must cover the bucket's objects")

  source_arn = _source_arn(statement)
  if not source_arn:
    raise PolicyError("Bucket policy must be conditioned on the distribution ARN")


def _as_list(value: Any) -> list[Any]:
  if value is None:
    return []
  return value if isinstance(value, list) else [value]


def _source_arn(statement: dict[str, Any]) -> str | None:
  for operator in statement.get("Condition", {}).values():
    for key, value in operator.items():
      if key.lower() == SOURCE_ARN_CONDITION_KEY.lower():
        values = _as_list(value)
        return str(values[0]) if len(values) == 1 else None
  return None


def _is_cloudfront_statement(statement: dict[str, Any]) -> bool:
  principal = statement.get("Principal", {})
  if not isinstance(principal, dict):
    return False
  return CLOUDFRONT_SERVICE_PRINCIPAL in _as_list(principal.get("Service"))


def verify_access(s3_client: Any, bucket: str, distribution_arn: str) -> None:
  """Check the live bucket is private and readable only by distribution_arn.

  Args:
    s3_client: boto3 S3 client
    bucket: Site bucket name
    distribution_arn: ARN of the distribution currently serving the site

  Raises:
    PolicyError: If public access is not fully blocked or the policy is
      missing or scoped to another distribution
  """
  try:
    response = s3_client.get_public_access_block(Bucket=bucket)
  except ClientError as e:
    raise PolicyError(f"Cannot read public access block for {bucket}: {e}") from e

  flags = response.get("PublicAccessBlockConfiguration", {})
  open_flags = [name for name in PUBLIC_ACCESS_BLOCK_FLAGS if flags.get(name) is not True]
  if open_flags:
    raise PolicyError(f"Public access is not fully blocked on {bucket}: {', '.join(open_flags)}")

  try:
    policy = json.loads(s3_client.get_bucket_policy(Bucket=bucket)["Policy"])
  except ClientError as e:
    raise PolicyError(f"Cannot read bucket policy for {bucket}: {e}") from e
  except (KeyError, json.JSONDecodeError) as e:
    raise PolicyError(f"Bucket policy for {bucket} is malformed: {e}") from e
  if not isinstance(policy, dict):
    raise PolicyError(f"Bucket policy for {bucket} is malformed: not a JSON object")

  statements = [s for s in _as_list(policy.get("Statement")) if _is_cloudfront_statement(s)]
  if not statements:
    raise PolicyError(f"Bucket policy for {bucket} does not grant CloudFront access")

  for statement in statements:
    source_arn = _source_arn(statement)
    if source_arn != distribution_arn:
      raise PolicyError(
        f"Bucket policy for {bucket} is scoped to {source_arn}, expected {distribution_arn}"
      )
