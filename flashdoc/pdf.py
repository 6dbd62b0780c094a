"""Headless-browser PDF rendering.

The engine is a scoped resource: ``engine_session`` always closes it,
including when loading or exporting fails.
"""
from __future__ import annotations

import html
import re
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Protocol

from .utils import ensure_dir

PAGE_FORMAT = "A4"

HEAD_OPEN_PATTERN = re.compile(r"<head\b[^>]*>", re.IGNORECASE)


class PdfEngine(Protocol):
    async def load(self, content: str, base_url: str | None = None) -> None: ...

    async def export_pdf(self, path: str | Path, page_format: str) -> None: ...

    async def close(self) -> None: ...


EngineFactory = Callable[[], Awaitable[PdfEngine]]


def base_url_for(html_path: str | Path) -> str:
    """file: URL of the directory holding ``html_path``, with trailing slash."""
    return Path(html_path).resolve().parent.as_uri().rstrip("/") + "/"


def with_base_href(content: str, base_url: str) -> str:
    """Insert ``<base href>`` so relative ``src`` values resolve against base_url."""
    tag = f'<base href="{html.escape(base_url, quote=True)}">'
    m = HEAD_OPEN_PATTERN.search(content)
    if m:
        return content[: m.end()] + tag + content[m.end() :]
    return tag + content


class PlaywrightEngine:
    """PdfEngine backed by one Chromium page."""

    def __init__(self, playwright: Any, browser: Any, page: Any) -> None:
        self._playwright = playwright
        self._browser = browser
        self._page = page

    async def load(self, content: str, base_url: str | None = None) -> None:
        if base_url:
            # give the page a file: origin so local images may be loaded
            await self._page.goto(base_url)
            content = with_base_href(content, base_url)
        await self._page.set_content(content, wait_until="networkidle")

    async def export_pdf(self, path: str | Path, page_format: str) -> None:
        await self._page.pdf(path=str(path), format=page_format, print_background=True)

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


async def launch_playwright_engine() -> PlaywrightEngine:
    try:
        from playwright.async_api import async_playwright
    except ImportError as e:
        raise RuntimeError(
            "playwright is required for PDF output. "
            "Install with: pip install playwright && playwright install chromium"
        ) from e

    pw = await async_playwright().start()
    try:
        browser = await pw.chromium.launch()
    except BaseException:
        await pw.stop()
        raise
    try:
        page = await browser.new_page()
    except BaseException:
        try:
            await browser.close()
        finally:
            await pw.stop()
        raise
    return PlaywrightEngine(pw, browser, page)


@asynccontextmanager
async def engine_session(factory: EngineFactory = launch_playwright_engine) -> AsyncIterator[PdfEngine]:
    engine = await factory()
    try:
        yield engine
    finally:
        await engine.close()


async def render_html_to_pdf(
    content: str,
    pdf_path: str | Path,
    *,
    base_url: str | None = None,
    page_format: str = PAGE_FORMAT,
    engine_factory: EngineFactory = launch_playwright_engine,
) -> Path:
    pdf_path = Path(pdf_path)
    ensure_dir(pdf_path.parent)
    async with engine_session(engine_factory) as engine:
        await engine.load(content, base_url)
        await engine.export_pdf(pdf_path, page_format)
    return pdf_path
