"""Resolve the deployed CloudFront distribution from the site stack outputs."""

from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError

from .exceptions import DeliveryError

REQUIRED_OUTPUTS = {
  "bucket_name": "BucketName",
  "distribution_id": "DistributionId",
  "domain_name": "DistributionDomainName",
  "arn": "DistributionArn",
}


@dataclass(frozen=True)
class DeliveryConfiguration:
  """The distribution serving a site and the bucket behind it."""

  distribution_id: str
  domain_name: str
  arn: str
  bucket_name: str

  @property
  def url(self) -> str:
    return f"https://{self.domain_name}"


def _outputs_by_key(stack: dict[str, Any]) -> dict[str, str]:
  return {output["OutputKey"]: output["OutputValue"] for output in stack.get("Outputs", [])}


def resolve_delivery(cloudformation_client: Any, stack_name: str) -> DeliveryConfiguration:
  """Read the DeliveryConfiguration for a deployed site stack.

  Raises:
    DeliveryError: If the stack does not exist or lacks an expected output
  """
  try:
    response = cloudformation_client.describe_stacks(StackName=stack_name)
  except ClientError as e:
    raise DeliveryError(f"Cannot describe stack {stack_name}: {e}") from e

  stacks = response.get("Stacks", [])
  if not stacks:
    raise DeliveryError(f"Stack {stack_name} not found")

  outputs = _outputs_by_key(stacks[0])
  missing = [name for name in REQUIRED_OUTPUTS.values() if name not in outputs]
  if missing:
    raise DeliveryError(f"Stack {stack_name} is missing outputs: {', '.join(missing)}")

  return DeliveryConfiguration(
    **{field_name: outputs[output] for field_name, output in REQUIRED_OUTPUTS.items()}
  )
