"""Tabby configuration.

TabbyConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class TabbyConfig:
    """Configuration for a Tabby project.

    Attributes:
        root: Project root (contains src/, _data/, and receives _site/).
              Always resolved to an absolute path on construction.
        src_dir: Directory holding one sub-directory per campaign.
        output: Output directory for built pages and copied assets.
        data_dir: Directory holding the campaign registry.
        campaigns_file: Registry file name inside ``data_dir``.
        host: Bind address for the dev server.
        port: Bind port for the dev server.
        reload_path: URL path of the live-reload event stream.
        clean: Empty the output directory before a full build.

    """

    root: Path = field(default_factory=Path.cwd)
    src_dir: str = "src"
    output: Path = field(default_factory=lambda: Path("_site"))
    data_dir: str = "_data"
    campaigns_file: str = "campaigns.json"
    host: str = "127.0.0.1"
    port: int = 3000
    reload_path: str = "/_lr"
    clean: bool = False

    def __post_init__(self) -> None:
        # watchfiles reports absolute paths; relative_to() needs an absolute root.
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def src_path(self) -> Path:
        """Absolute path to the campaign source tree."""
        return self.root / self.src_dir

    @property
    def campaigns_path(self) -> Path:
        """Absolute path to the campaign registry file."""
        return self.root / self.data_dir / self.campaigns_file

    @property
    def output_path(self) -> Path:
        """Absolute path to output directory."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output
