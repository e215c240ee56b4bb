#!/usr/bin/env python3
"""Publish a site's content to its bucket and invalidate changed paths."""

import argparse
import logging
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
from botocore.config import Config as BotoConfig

from infrastructure.config import Config, SiteConfig
from site_publisher import (
  ConvergenceResult,
  DesiredState,
  SitePublisherError,
  StateStore,
  converge,
  resolve_delivery,
)

RETRY_CONFIG = BotoConfig(retries={"max_attempts": 5, "mode": "standard"})


def publish(
  site: SiteConfig,
  *,
  content_dir: Path | None = None,
  stack_name: str | None = None,
  prune: bool | None = None,
  wait: bool | None = None,
  verify_policy: bool = True,
) -> ConvergenceResult:
  """Converge one site's bucket and edge cache to its local content.

  Args:
    site: Site configuration from sites.yaml
    content_dir: Override for the configured content directory
    stack_name: Override for the CloudFormation stack name
    prune: Override for the configured prune setting
    wait: Override for the configured wait_for_invalidation setting
    verify_policy: Check bucket lock-down before publishing

  Returns:
    ConvergenceResult for the run
  """
  cloudformation = boto3.client("cloudformation", region_name=site.region, config=RETRY_CONFIG)
  s3 = boto3.client("s3", region_name=site.region, config=RETRY_CONFIG)
  # CloudFront is a global service homed in us-east-1
  cloudfront = boto3.client("cloudfront", region_name="us-east-1", config=RETRY_CONFIG)

  delivery = resolve_delivery(cloudformation, stack_name or site.stack_name)
  desired = DesiredState.from_directory(site.name, content_dir or site.content_dir, delivery)

  return converge(
    desired,
    s3_client=s3,
    cloudfront_client=cloudfront,
    state_store=StateStore(site.state_path),
    prune=site.prune if prune is None else prune,
    verify_policy=verify_policy,
    wait_for_invalidation=site.wait_for_invalidation if wait is None else wait,
    cache_control=site.cache_control,
  )


def print_result(site: SiteConfig, result: ConvergenceResult) -> None:
  """Print a human readable summary of a run."""
  for obj in result.uploaded:
    print(f"✓ Uploaded {obj.key}")
  for key in result.deleted:
    print(f"✓ Deleted {key}")
  if result.invalidation:
    paths = ", ".join(result.invalidation.paths)
    print(f"✓ Invalidation {result.invalidation.invalidation_id}: {paths}")
  if result.invalidation_error:
    print(f"! Invalidation failed, will retry next run: {result.invalidation_error}")
  if not result.changed:
    print(f"✓ {site.name} is up to date ({len(result.unchanged)} objects unchanged)")


def main() -> None:
  """Main entry point."""
  parser = argparse.ArgumentParser(description="Publish static site content")
  parser.add_argument("site", help="Site name from the configuration file")
  parser.add_argument(
    "--config",
    default="sites.yaml",
    help="Path to the sites configuration (default: sites.yaml)",
  )
  parser.add_argument("--stack", help="CloudFormation stack name (default: from config)")
  parser.add_argument("--content-dir", type=Path, help="Site directory (default: from config)")
  parser.add_argument("--region", help="AWS region (default: from config)")
  parser.add_argument(
    "--prune",
    action=argparse.BooleanOptionalAction,
    default=None,
    help="Delete objects no longer present locally",
  )
  parser.add_argument(
    "--wait",
    action=argparse.BooleanOptionalAction,
    default=None,
    help="Wait for the CloudFront invalidation to complete",
  )
  parser.add_argument(
    "--skip-policy-check",
    action="store_true",
    help="Do not verify public access block and bucket policy",
  )
  parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

  args = parser.parse_args()

  logging.basicConfig(
    level=logging.DEBUG if args.verbose else logging.INFO,
    format="%(levelname)s %(name)s: %(message)s",
  )

  try:
    site = Config.from_yaml(args.config).site(args.site)
  except (OSError, KeyError, ValueError) as e:
    print(f"Error loading configuration: {e}", file=sys.stderr)
    sys.exit(1)

  if args.region:
    site.region = args.region

  try:
    result = publish(
      site,
      content_dir=args.content_dir,
      stack_name=args.stack,
      prune=args.prune,
      wait=args.wait,
      verify_policy=not args.skip_policy_check,
    )
  except SitePublisherError as e:
    print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)

  print_result(site, result)


if __name__ == "__main__":
  main()
