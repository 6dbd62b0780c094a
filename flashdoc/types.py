from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageRef:
    path: str  # image file (absolute or relative to the CWD) or a URL
    width: int
    height: int


@dataclass(frozen=True)
class FlashcardData:
    uid: int
    pos: str | int  # part of speech or position label
    english: str
    local: str  # word in the local language
    phonetic: str  # IPA
    image: ImageRef | None = None
