"""Pytest fixtures for CDK construct and publisher tests."""

from pathlib import Path

import aws_cdk as cdk
import pytest


@pytest.fixture
def app() -> cdk.App:
  """Create a CDK App for testing."""
  return cdk.App()


@pytest.fixture
def stack(app: cdk.App) -> cdk.Stack:
  """Create a CDK Stack for testing."""
  return cdk.Stack(
    app, "TestStack", env=cdk.Environment(account="123456789012", region="us-east-1")
  )


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
  """Create a site with one document and one image."""
  root = tmp_path / "site"
  (root / "images").mkdir(parents=True)
  (root / "index.html").write_text("<html><body>Hello</body></html>")
  (root / "images" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\nlogo")
  return root
