"""Configuration loader for multi-site management."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml
from aws_cdk import RemovalPolicy

DEFAULT_CACHE_CONTROL = "public, max-age=300"


@dataclass
class SiteConfig:
  """Configuration for a single static site."""

  name: str
  owner: str
  email: str
  content_dir: str = "site"
  domain: str | None = None
  certificate_arn: str | None = None
  prune: bool = False
  wait_for_invalidation: bool = False
  cache_control: str = DEFAULT_CACHE_CONTROL
  removal_policy: RemovalPolicy = RemovalPolicy.RETAIN
  region: str = "us-east-1"
  state_file: str | None = None

  def __post_init__(self) -> None:
    if self.domain and not self.certificate_arn:
      raise ValueError(f"Site {self.name}: a custom domain requires certificate_arn")

  @property
  def stack_name(self) -> str:
    return f"StaticSite-{self.name.replace('.', '-')}"

  @property
  def state_path(self) -> Path:
    return Path(self.state_file or f".site-state/{self.name}.json")


@dataclass
class Config:
  """Multi-site configuration."""

  sites: list[SiteConfig] = field(default_factory=list)

  def site(self, name: str) -> SiteConfig:
    """Look up a site by name."""
    for site in self.sites:
      if site.name == name:
        return site
    raise KeyError(f"No site named {name!r} in configuration")

  @classmethod
  def from_yaml(cls, path: Path | str = "sites.yaml") -> "Config":
    """Load configuration from YAML file."""
    with open(path) as f:
      data = yaml.safe_load(f) or {}

    defaults = data.get("defaults", {})
    sites: list[SiteConfig] = []

    for site_data in data.get("sites", []):
      # Merge defaults with site-specific config
      merged = {**defaults, **site_data}

      # Convert removal_policy string to enum
      removal_policy_str = merged.pop("removal_policy", "retain")
      removal_policy = {
        "retain": RemovalPolicy.RETAIN,
        "destroy": RemovalPolicy.DESTROY,
        "snapshot": RemovalPolicy.SNAPSHOT,
      }.get(removal_policy_str.lower(), RemovalPolicy.RETAIN)

      sites.append(
        SiteConfig(
          name=merged["name"],
          owner=merged["owner"],
          email=merged["email"],
          content_dir=merged.get("content_dir", "site"),
          domain=merged.get("domain"),
          certificate_arn=merged.get("certificate_arn"),
          prune=merged.get("prune", False),
          wait_for_invalidation=merged.get("wait_for_invalidation", False),
          cache_control=merged.get("cache_control", DEFAULT_CACHE_CONTROL),
          removal_policy=removal_policy,
          region=merged.get("region", "us-east-1"),
          state_file=merged.get("state_file"),
        )
      )

    return cls(sites=sites)
