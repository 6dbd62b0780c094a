from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from .config import load_deck
from .document import DocumentBuilder
from .layout import parse_layout
from .pdf import EngineFactory, base_url_for, launch_playwright_engine, render_html_to_pdf
from .utils import read_text


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="flashdoc")
    sub = p.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build a flashcard HTML document (and optionally a PDF) from a deck")
    build.add_argument("--deck", required=True, help="Deck JSON file")
    build.add_argument("--out", required=True, help="Output base filename (writes <out>.htm / <out>.pdf)")
    build.add_argument("--out-dir", default=".", help="Output directory (default: current directory)")
    build.add_argument("--layout", default=None, help="flow, 1x2, 2x3 or COLSxROWS (default: from deck)")
    build.add_argument("--image-size", type=int, default=None, help="Blank image placeholder size in px")
    build.add_argument("--templates", default=None, help="Template directory (default: bundled templates)")
    build.add_argument("--pdf", action="store_true", help="Also render an A4 PDF with headless Chromium")

    pdf = sub.add_parser("pdf", help="Render an existing .htm document to PDF")
    pdf.add_argument("--html", required=True, help="HTML document to render")
    pdf.add_argument("--out", default=None, help="PDF path (default: next to the HTML file)")

    return p


def cmd_build(args: argparse.Namespace, engine_factory: EngineFactory = launch_playwright_engine) -> int:
    try:
        deck = load_deck(args.deck)
        layout = parse_layout(args.layout or deck.layout)
    except (ValueError, TypeError, FileNotFoundError) as e:
        print(f"build_failed: {e}")
        return 1
    image_size = args.image_size if args.image_size is not None else deck.image_size

    doc = DocumentBuilder.create(args.out, template_dir=args.templates, out_dir=args.out_dir, title=deck.title)
    cards = [doc.render_flashcard(c, image_size) for c in deck.cards]
    if layout is None:
        doc.append_sequential(cards)
        print(f"cards={len(cards)} layout=flow")
    else:
        pages = doc.append_paginated(cards, layout)
        print(f"cards={len(cards)} layout={layout.name} pages={pages}")
    doc.persist()

    if args.pdf:
        asyncio.run(doc.render_to_pdf(engine_factory=engine_factory))
    return 0


def cmd_pdf(args: argparse.Namespace, engine_factory: EngineFactory = launch_playwright_engine) -> int:
    html_path = Path(args.html)
    pdf_path = Path(args.out) if args.out else html_path.with_suffix(".pdf")
    out = asyncio.run(
        render_html_to_pdf(
            read_text(html_path),
            pdf_path,
            base_url=base_url_for(html_path),
            engine_factory=engine_factory,
        )
    )
    print(f"PDF written to {out}")
    return 0


def main(argv: list[str] | None = None, *, engine_factory: EngineFactory = launch_playwright_engine) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "build":
        return cmd_build(args, engine_factory)

    if args.command == "pdf":
        return cmd_pdf(args, engine_factory)

    raise SystemExit(2)


if __name__ == "__main__":
    raise SystemExit(main())
