"""Tests for the publish_site script."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from infrastructure.config import SiteConfig
from site_publisher import ConvergenceResult, InvalidationRequest, PublishedObject
from tests.fakes import (
  BUCKET,
  DISTRIBUTION_ARN,
  DISTRIBUTION_ID,
  MockCloudFrontClient,
  MockS3Client,
)

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "scripts"))

import publish_site  # noqa: E402


class MockCloudFormationClient:
  """Mock CloudFormation client for a deployed site stack."""

  def describe_stacks(self, StackName: str) -> dict:
    outputs = {
      "BucketName": BUCKET,
      "DistributionId": DISTRIBUTION_ID,
      "DistributionDomainName": "d111111abcdef8.cloudfront.net",
      "DistributionArn": DISTRIBUTION_ARN,
    }
    return {
      "Stacks": [
        {"Outputs": [{"OutputKey": k, "OutputValue": v} for k, v in outputs.items()]}
      ]
    }


@pytest.fixture
def site(site_dir: Path, tmp_path: Path) -> SiteConfig:
  return SiteConfig(
    name="example-site",
    owner="Test Owner",
    email="test@example.com",
    content_dir=str(site_dir),
    state_file=str(tmp_path / "state.json"),
  )


class TestPublish:
  """Tests for publish()."""

  def test_publishes_through_stack_outputs(self, site: SiteConfig) -> None:
    s3 = MockS3Client()
    cloudfront = MockCloudFrontClient()
    clients = {
      "cloudformation": MockCloudFormationClient(),
      "s3": s3,
      "cloudfront": cloudfront,
    }

    with patch("publish_site.boto3") as mock_boto3:
      mock_boto3.client.side_effect = lambda name, **kwargs: clients[name]
      result = publish_site.publish(site)

    assert sorted(s3.objects) == ["images/logo.png", "index.html"]
    assert cloudfront.invalidations[0]["DistributionId"] == DISTRIBUTION_ID
    assert result.invalidation is not None

  def test_cloudfront_client_uses_us_east_1(self, site: SiteConfig) -> None:
    site.region = "eu-west-1"
    clients = {
      "cloudformation": MockCloudFormationClient(),
      "s3": MockS3Client(),
      "cloudfront": MockCloudFrontClient(),
    }

    with patch("publish_site.boto3") as mock_boto3:
      mock_boto3.client.side_effect = lambda name, **kwargs: clients[name]
      publish_site.publish(site)

    regions = {c.args[0]: c.kwargs["region_name"] for c in mock_boto3.client.call_args_list}
    assert regions == {"cloudformation": "eu-west-1", "s3": "eu-west-1", "cloudfront": "us-east-1"}


class TestPrintResult:
  """Tests for print_result()."""

  def test_up_to_date(self, site: SiteConfig, capsys: pytest.CaptureFixture[str]) -> None:
    publish_site.print_result(site, ConvergenceResult(unchanged=["index.html"]))

    assert "example-site is up to date (1 objects unchanged)" in capsys.readouterr().out

  def test_changes(self, site: SiteConfig, capsys: pytest.CaptureFixture[str]) -> None:
    result = ConvergenceResult(
      uploaded=[PublishedObject(key="index.html", fingerprint="h1")],
      invalidation=InvalidationRequest(paths=["/index.html"], invalidation_id="I1"),
    )

    publish_site.print_result(site, result)

    out = capsys.readouterr().out
    assert "✓ Uploaded index.html" in out
    assert "✓ Invalidation I1: /index.html" in out


class TestMain:
  """Tests for the command line entry point."""

  def test_unknown_site_exits(self, tmp_path: Path) -> None:
    config = tmp_path / "sites.yaml"
    config.write_text("sites: []\n")

    with patch.object(sys, "argv", ["publish_site.py", "missing", "--config", str(config)]):
      with pytest.raises(SystemExit) as exc_info:
        publish_site.main()

    assert exc_info.value.code == 1

  def test_publisher_error_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "sites.yaml"
    config.write_text(
      "sites:\n  - name: example-site\n    owner: o\n    email: e@example.com\n"
    )
    cloudformation = MagicMock()
    cloudformation.describe_stacks.return_value = {"Stacks": []}

    with (
      patch.object(sys, "argv", ["publish_site.py", "example-site", "--config", str(config)]),
      patch("publish_site.boto3") as mock_boto3,
    ):
      mock_boto3.client.return_value = cloudformation
      with pytest.raises(SystemExit) as exc_info:
        publish_site.main()

    assert exc_info.value.code == 1
    assert "Stack StaticSite-example-site not found" in capsys.readouterr().err
