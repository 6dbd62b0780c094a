"""Flashcard document builder.

A document is the header template followed by rendered cards (either one
after another or grouped into page templates) and closed by the end tags.
It is written once as ``<base>.htm`` and can then be rendered to
``<base>.pdf``.
"""
from __future__ import annotations

import html
import os
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_TITLE
from .layout import GridLayout, layout_for_count, paginate
from .pdf import PAGE_FORMAT, EngineFactory, base_url_for, launch_playwright_engine, render_html_to_pdf
from .templating import (
    FLASH_IN,
    HEADER_IN,
    TEMPLATE_ROOT,
    fill,
    page_template_name,
    placeholders,
    require_template,
)
from .types import FlashcardData, ImageRef
from .utils import is_url, read_text, write_text

CLOSING_TAGS = "</body></html>"


def image_src(path: str, doc_dir: str | Path) -> str:
    """``src`` for an image file as seen from a document in ``doc_dir``.

    URLs are kept as they are. File paths become relative to ``doc_dir``,
    or an absolute file: URI when no relative path exists (other drive).
    """
    if is_url(path):
        return path
    target = Path(path).resolve()
    try:
        return Path(os.path.relpath(target, Path(doc_dir).resolve())).as_posix()
    except ValueError:
        return target.as_uri()


def image_tag(image: ImageRef, src: str) -> str:
    return (
        f'<p><img src="{html.escape(src, quote=True)}" class="img-fluid rounded" '
        f'width="{image.width}" height="{image.height}"></p>'
    )


def image_spacer(size: int) -> str:
    return f'<div style="width:{size}px; height:{size}px"></div>'


class DocumentBuilder:
    def __init__(
        self,
        *,
        header: str,
        html_path: Path,
        pdf_path: Path,
        template_dir: Path,
        title: str = DEFAULT_TITLE,
    ) -> None:
        self.title = title
        self.html_path = html_path
        self.pdf_path = pdf_path
        self.template_dir = template_dir
        self._parts: list[str] = [header]
        self._finalized = False
        self._persisted = False

    @classmethod
    def create(
        cls,
        base_filename: str,
        *,
        template_dir: str | Path | None = None,
        out_dir: str | Path = ".",
        title: str = DEFAULT_TITLE,
    ) -> "DocumentBuilder":
        """Start a document from the header template.

        Exits the process with status 1 if the header template is missing.
        Nothing is written to disk until ``persist``.
        """
        tdir = Path(template_dir) if template_dir is not None else TEMPLATE_ROOT
        header = fill(require_template(tdir / HEADER_IN), {"title": html.escape(title)})
        out = Path(out_dir)
        return cls(
            header=header,
            html_path=out / f"{base_filename}.htm",
            pdf_path=out / f"{base_filename}.pdf",
            template_dir=tdir,
            title=title,
        )

    @property
    def html(self) -> str:
        return "".join(self._parts)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _append(self, text: str) -> None:
        if self._finalized:
            raise RuntimeError(f"document {self.html_path.name} is already finalized")
        self._parts.append(text)

    def render_flashcard(self, data: FlashcardData, image_placeholder_size: int) -> str:
        """Fill the flash card template for one entry.

        The template is read on every call. Placeholders are ``${uid}``,
        ``${pos}``, ``${english}``, ``${local}``, ``${phonetic}`` and
        ``${image}``. Text fields are HTML-escaped, so markup such as ``<b>``
        in a deck entry shows up literally; put formatting in the template.

        ``${image}`` gets an ``<img>`` whose ``src`` is relative to the output
        document, or a blank spacer of ``image_placeholder_size`` pixels when
        the entry has no image, so card heights stay aligned on the page.
        """
        flash = require_template(self.template_dir / FLASH_IN)
        if data.image:
            image = image_tag(data.image, image_src(data.image.path, self.html_path.parent))
        else:
            image = image_spacer(image_placeholder_size)
        return fill(
            flash,
            {
                "uid": data.uid,
                "pos": html.escape(str(data.pos)),
                "english": html.escape(data.english),
                "local": html.escape(data.local),
                "phonetic": html.escape(data.phonetic),
                "image": image,
            },
        )

    def append_sequential(self, cards: Sequence[str]) -> None:
        for card in cards:
            self._append(card)

    def append_paginated(self, cards: Sequence[str], layout: GridLayout | int) -> int:
        """Place cards into page templates, ``layout.per_page`` per page.

        Returns the number of pages appended. Empty slots on the last page
        are filled with empty strings.
        """
        if isinstance(layout, int):
            layout = layout_for_count(layout)

        page_template = require_template(self.template_dir / page_template_name(layout))
        slots = layout.slot_names()
        present = set(placeholders(page_template))
        missing = [s for s in slots if s not in present]
        if missing:
            raise ValueError(
                f"page template {page_template_name(layout)} has no slot for: {', '.join(missing)}"
            )

        pages = paginate(cards, layout.per_page)
        for group in pages:
            self._append(fill(page_template, dict(zip(slots, group))))
        return len(pages)

    def finalize(self) -> None:
        if self._finalized:
            return
        self._parts.append(CLOSING_TAGS)
        self._finalized = True

    def persist(self) -> Path:
        self.finalize()
        write_text(self.html_path, self.html)
        self._persisted = True
        print(f"Flashcards written to {self.html_path}")
        return self.html_path

    async def render_to_pdf(
        self,
        *,
        page_format: str = PAGE_FORMAT,
        engine_factory: EngineFactory = launch_playwright_engine,
    ) -> Path:
        """Render the persisted HTML file to ``pdf_path``.

        Reads the document back from disk, so ``persist`` must run first on
        this builder; a file left over from an earlier run is not rendered.
        Relative image paths resolve against the document's directory.
        """
        if not self._persisted or not self.html_path.exists():
            raise FileNotFoundError(f"HTML not written yet: {self.html_path} (call persist() first)")
        content = read_text(self.html_path)
        out = await render_html_to_pdf(
            content,
            self.pdf_path,
            base_url=base_url_for(self.html_path),
            page_format=page_format,
            engine_factory=engine_factory,
        )
        print(f"PDF written to {out}")
        return out
