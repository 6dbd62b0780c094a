"""Printable flashcard document builder.

This package focuses on producing:
- an HTML document of flashcards laid out N-per-page
- an optional A4 PDF rendered through headless Chromium

Deck editing and spaced-repetition exports are out of scope.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
