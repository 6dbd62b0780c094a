from __future__ import annotations

from pathlib import Path
from typing import Any

from PIL import Image

from .types import ImageRef
from .utils import is_url


def fit_within(width: int, height: int, max_size: int) -> tuple[int, int]:
    """Scale (width, height) down to fit a max_size square. Never upscales."""
    if width <= max_size and height <= max_size:
        return width, height
    scale = max_size / float(max(width, height))
    return max(1, round(width * scale)), max(1, round(height * scale))


def measure_image(path: str | Path, *, max_size: int | None = None) -> ImageRef:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"image not found: {p}")
    with Image.open(p) as img:
        width, height = img.size
    if max_size is not None:
        width, height = fit_within(width, height, max_size)
    return ImageRef(path=str(path), width=int(width), height=int(height))


def resolve_image(raw: Any, *, base_dir: str | Path, max_size: int | None = None) -> ImageRef | None:
    """Build an ImageRef from a deck entry's ``image`` value.

    Accepts a bare path or an object with ``path`` and optional ``width`` /
    ``height``. Relative file paths are taken relative to ``base_dir`` (the
    deck directory); URLs are kept as written and must carry their size.
    Missing dimensions are read from the file.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        raw = {"path": raw}
    if not isinstance(raw, dict) or not raw.get("path"):
        raise ValueError(f"image must be a path or an object with a path, got {raw!r}")

    src = str(raw["path"])
    if not is_url(src):
        src = str(Path(base_dir) / src)
    width = raw.get("width")
    height = raw.get("height")
    if width is not None and height is not None:
        try:
            return ImageRef(path=src, width=int(width), height=int(height))
        except (TypeError, ValueError) as e:
            raise ValueError(f"image {src}: width and height must be integers") from e

    measured = measure_image(src, max_size=max_size)
    return ImageRef(path=src, width=measured.width, height=measured.height)
