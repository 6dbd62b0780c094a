"""Deck files: the title, layout and ordered card list for one document."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .images import resolve_image
from .types import FlashcardData
from .utils import load_json

DEFAULT_TITLE = "Flash Cards"
DEFAULT_LAYOUT = "1x2"
DEFAULT_IMAGE_SIZE = 150


@dataclass(frozen=True)
class DeckConfig:
    title: str
    layout: str  # "flow" or COLSxROWS
    image_size: int  # px, spacer size and max image box
    cards: tuple[FlashcardData, ...]


def _card_from_dict(idx: int, raw: Any, *, base_dir: Path, image_size: int) -> FlashcardData:
    if not isinstance(raw, dict):
        raise ValueError(f"card[{idx}]: not an object")
    if not raw.get("english"):
        raise ValueError(f"card[{idx}]: missing field english")

    uid = raw.get("uid")
    if uid is None:
        uid = idx + 1
    elif isinstance(uid, bool) or not isinstance(uid, (int, str)) or not str(uid).strip().isdigit():
        raise ValueError(f"card[{idx}]: invalid uid {uid!r}")

    pos = raw.get("pos")
    return FlashcardData(
        uid=int(uid),
        pos="" if pos is None else pos,
        english=str(raw["english"]),
        local=str(raw.get("local") or ""),
        phonetic=str(raw.get("phonetic") or ""),
        image=resolve_image(raw.get("image"), base_dir=base_dir, max_size=image_size),
    )


def load_deck(deck_path: str | Path) -> DeckConfig:
    deck_path = Path(deck_path)
    data = load_json(deck_path)
    if isinstance(data, list):
        # bare list of cards
        data = {"cards": data}
    if not isinstance(data, dict):
        raise ValueError("deck must be a list of cards or an object with a cards list")

    cards_raw = data.get("cards", [])
    if not isinstance(cards_raw, list):
        raise ValueError("deck field cards must be a list")

    image_size = int(data.get("image_size") or DEFAULT_IMAGE_SIZE)
    base_dir = deck_path.parent
    cards = tuple(
        _card_from_dict(i, c, base_dir=base_dir, image_size=image_size) for i, c in enumerate(cards_raw)
    )
    return DeckConfig(
        title=str(data.get("title") or DEFAULT_TITLE),
        layout=str(data.get("layout") or DEFAULT_LAYOUT),
        image_size=image_size,
        cards=cards,
    )
