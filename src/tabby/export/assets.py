"""Asset handling — mirror each campaign's ``assets/`` tree into the output.

``src/<slug>/assets/css/site.css`` is copied to ``<output>/<slug>/css/site.css``
so pages can reference it as ``{{ "css/site.css" | campaign_asset }}``.
"""

from __future__ import annotations

import shutil
from pathlib import Path

ASSETS_DIR = "assets"


def campaign_assets_path(src_path: Path, slug: str) -> Path:
    """Return ``<src>/<slug>/assets`` (which may not exist)."""
    return src_path / slug / ASSETS_DIR


def copy_asset_tree(asset_src: Path, dest_root: Path) -> int:
    """Recursively copy *asset_src* into *dest_root*, preserving structure.

    Existing files are overwritten; files already in *dest_root* that have no
    counterpart are left alone (built pages live there too).  Hidden files
    (names starting with ``.``) are skipped.

    Returns:
        Number of files copied.

    """
    if not asset_src.is_dir():
        return 0

    copied = 0
    for src_file in sorted(asset_src.rglob("*")):
        if not src_file.is_file():
            continue

        relative = src_file.relative_to(asset_src)
        if any(part.startswith(".") for part in relative.parts):
            continue

        dest_file = dest_root / relative
        dest_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_file, dest_file)
        copied += 1

    return copied
