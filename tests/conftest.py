from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

import pytest

from flashdoc.types import FlashcardData, ImageRef


@pytest.fixture
def workspace_dir() -> Path:
    """Create temporary workspace."""
    tmp = tempfile.mkdtemp()
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def template_dir(workspace_dir: Path) -> Path:
    """Minimal templates whose output is easy to assert on."""
    tdir = workspace_dir / "templates"
    tdir.mkdir()
    (tdir / "header.htm.in").write_text("<html><title>${title}</title><body>", encoding="utf-8")
    (tdir / "flash.htm.in").write_text(
        "<card>${uid}|${pos}|${english}|${local}|${phonetic}|${image}</card>", encoding="utf-8"
    )
    (tdir / "page1x2.htm.in").write_text("<page>${card0};${card1}</page>", encoding="utf-8")
    (tdir / "page2x3.htm.in").write_text(
        "<page>${card0};${card1};${card2};${card3};${card4};${card5}</page>", encoding="utf-8"
    )
    return tdir


@pytest.fixture
def dog() -> FlashcardData:
    return FlashcardData(uid=1, pos="noun", english="dog", local="pies", phonetic="pjes")


@pytest.fixture
def cat_with_image(workspace_dir: Path) -> FlashcardData:
    """Image stored next to the document the builder fixture writes."""
    return FlashcardData(
        uid=2,
        pos="noun",
        english="cat",
        local="kot",
        phonetic="kot",
        image=ImageRef(path=str(workspace_dir / "out" / "img" / "cat.png"), width=120, height=90),
    )
