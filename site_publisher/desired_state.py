"""Explicit description of what a converged site looks like."""

from dataclasses import dataclass, field
from pathlib import Path

from .assets import Asset, discover_assets
from .delivery import DeliveryConfiguration


@dataclass(frozen=True)
class DesiredState:
  """Every asset that should be published behind one distribution."""

  site_name: str
  content_dir: Path
  delivery: DeliveryConfiguration
  assets: tuple[Asset, ...] = field(default_factory=tuple)

  @classmethod
  def from_directory(
    cls, site_name: str, content_dir: Path | str, delivery: DeliveryConfiguration
  ) -> "DesiredState":
    """Read the site directory into a desired state.

    Raises:
      ReadError: If any asset cannot be read
    """
    content_dir = Path(content_dir)
    return cls(
      site_name=site_name,
      content_dir=content_dir,
      delivery=delivery,
      assets=tuple(discover_assets(content_dir)),
    )

  @property
  def fingerprints(self) -> dict[str, str]:
    return {asset.key: asset.fingerprint for asset in self.assets}
