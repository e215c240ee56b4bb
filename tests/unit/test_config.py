"""Tests for the configuration loader."""

import tempfile
from pathlib import Path

import pytest
from aws_cdk import RemovalPolicy

from infrastructure.config import Config, SiteConfig


def _load(yaml_content: str) -> Config:
  with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
    f.write(yaml_content)
    f.flush()

    return Config.from_yaml(Path(f.name))


class TestSiteConfig:
  """Test SiteConfig dataclass."""

  def test_default_values(self) -> None:
    """Verify default values are set correctly."""
    config = SiteConfig(
      name="example-site",
      owner="Test Owner",
      email="test@example.com",
    )

    assert config.name == "example-site"
    assert config.content_dir == "site"
    assert config.domain is None
    assert config.prune is False
    assert config.wait_for_invalidation is False
    assert config.cache_control == "public, max-age=300"
    assert config.removal_policy == RemovalPolicy.RETAIN
    assert config.region == "us-east-1"

  def test_stack_name(self) -> None:
    config = SiteConfig(name="example.com", owner="o", email="e@example.com")
    assert config.stack_name == "StaticSite-example-com"

  def test_default_state_path(self) -> None:
    config = SiteConfig(name="example-site", owner="o", email="e@example.com")
    assert config.state_path == Path(".site-state/example-site.json")

  def test_domain_requires_certificate(self) -> None:
    with pytest.raises(ValueError, match="certificate_arn"):
      SiteConfig(name="s", owner="o", email="e@example.com", domain="example.com")


class TestConfigFromYaml:
  """Test Config.from_yaml loading."""

  def test_load_simple_config(self) -> None:
    """Test loading a simple configuration."""
    config = _load(
      """
sites:
  - name: example-site
    owner: Test Owner
    email: test@example.com
"""
    )

    assert len(config.sites) == 1
    assert config.sites[0].name == "example-site"
    assert config.sites[0].owner == "Test Owner"

  def test_load_with_defaults(self) -> None:
    """Test loading configuration with defaults."""
    config = _load(
      """
defaults:
  region: us-west-2
  prune: true
  cache_control: "no-cache"

sites:
  - name: example-site
    owner: Test Owner
    email: test@example.com
"""
    )

    assert config.sites[0].region == "us-west-2"
    assert config.sites[0].prune is True
    assert config.sites[0].cache_control == "no-cache"

  def test_site_overrides_defaults(self) -> None:
    """Test that site-specific config overrides defaults."""
    config = _load(
      """
defaults:
  wait_for_invalidation: false

sites:
  - name: example-site
    owner: Test Owner
    email: test@example.com
    wait_for_invalidation: true
    content_dir: public
    state_file: state/example.json
"""
    )

    site = config.sites[0]
    assert site.wait_for_invalidation is True
    assert site.content_dir == "public"
    assert site.state_path == Path("state/example.json")

  def test_removal_policy_conversion(self) -> None:
    """Test removal policy string conversion."""
    config = _load(
      """
sites:
  - name: example-site
    owner: Test Owner
    email: test@example.com
    removal_policy: destroy
"""
    )

    assert config.sites[0].removal_policy == RemovalPolicy.DESTROY

  def test_custom_domain(self) -> None:
    config = _load(
      """
sites:
  - name: example-site
    owner: Test Owner
    email: test@example.com
    domain: example.com
    certificate_arn: arn:aws:acm:us-east-1:123456789012:certificate/abcd
"""
    )

    assert config.sites[0].domain == "example.com"
    assert config.sites[0].certificate_arn.endswith("certificate/abcd")

  def test_site_lookup(self) -> None:
    config = _load(
      """
sites:
  - name: one
    owner: Owner One
    email: one@example.com
  - name: two
    owner: Owner Two
    email: two@example.com
"""
    )

    assert config.site("two").owner == "Owner Two"
    with pytest.raises(KeyError):
      config.site("three")

  def test_empty_file(self) -> None:
    assert _load("").sites == []
