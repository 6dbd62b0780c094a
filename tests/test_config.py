"""Tests for deck loading and image measurement."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from PIL import Image

from flashdoc.config import DEFAULT_IMAGE_SIZE, DEFAULT_LAYOUT, load_deck
from flashdoc.images import fit_within, measure_image, resolve_image
from flashdoc.types import ImageRef


def _write_deck(path: Path, data) -> Path:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def wide_image(workspace_dir: Path) -> Path:
    """300x200 PNG under img/."""
    p = workspace_dir / "img" / "dog.png"
    p.parent.mkdir(parents=True)
    Image.new("RGB", (300, 200), color=(200, 120, 40)).save(p, format="PNG")
    return p


class TestImages:
    def test_fit_within_scales_down(self):
        assert fit_within(300, 200, 150) == (150, 100)

    def test_fit_within_never_upscales(self):
        assert fit_within(80, 40, 150) == (80, 40)

    def test_measure_image(self, wide_image: Path):
        ref = measure_image(wide_image)
        assert (ref.width, ref.height) == (300, 200)

        scaled = measure_image(wide_image, max_size=150)
        assert (scaled.width, scaled.height) == (150, 100)

    def test_measure_missing_image(self, workspace_dir: Path):
        with pytest.raises(FileNotFoundError):
            measure_image(workspace_dir / "nope.png")

    def test_resolve_explicit_dimensions(self, workspace_dir: Path):
        ref = resolve_image({"path": "img/none.png", "width": 64, "height": 48}, base_dir=workspace_dir)
        assert ref == ImageRef(path=str(workspace_dir / "img" / "none.png"), width=64, height=48)

    def test_resolve_measures_relative_to_base_dir(self, workspace_dir: Path, wide_image: Path):
        ref = resolve_image("img/dog.png", base_dir=workspace_dir, max_size=150)
        assert ref == ImageRef(path=str(wide_image), width=150, height=100)

    def test_resolve_empty(self, workspace_dir: Path):
        assert resolve_image(None, base_dir=workspace_dir) is None
        assert resolve_image("", base_dir=workspace_dir) is None

    def test_resolve_invalid(self, workspace_dir: Path):
        with pytest.raises(ValueError):
            resolve_image({"width": 10}, base_dir=workspace_dir)


class TestLoadDeck:
    def test_defaults(self, workspace_dir: Path):
        deck = load_deck(_write_deck(workspace_dir / "deck.json", [{"english": "dog", "local": "pies"}]))

        assert deck.title == "Flash Cards"
        assert deck.layout == DEFAULT_LAYOUT
        assert deck.image_size == DEFAULT_IMAGE_SIZE
        assert len(deck.cards) == 1
        card = deck.cards[0]
        assert card.uid == 1
        assert card.english == "dog"
        assert card.local == "pies"
        assert card.phonetic == ""
        assert card.image is None

    def test_full_deck_with_images(self, workspace_dir: Path, wide_image: Path):
        deck = load_deck(
            _write_deck(
                workspace_dir / "deck.json",
                {
                    "title": "Polski",
                    "layout": "2x3",
                    "image_size": 150,
                    "cards": [
                        {"uid": 10, "pos": "noun", "english": "dog", "local": "pies", "phonetic": "pjɛs",
                         "image": "img/dog.png"},
                        {"uid": 11, "pos": "noun", "english": "cat", "local": "kot", "phonetic": "kɔt",
                         "image": {"path": "img/cat.png", "width": 90, "height": 90}},
                    ],
                },
            )
        )

        assert deck.title == "Polski"
        assert deck.layout == "2x3"
        assert [c.uid for c in deck.cards] == [10, 11]
        assert deck.cards[0].image == ImageRef(path=str(wide_image), width=150, height=100)
        assert deck.cards[1].image == ImageRef(path=str(workspace_dir / "img" / "cat.png"), width=90, height=90)

    def test_missing_english(self, workspace_dir: Path):
        path = _write_deck(workspace_dir / "deck.json", {"cards": [{"english": "a"}, {"local": "b"}]})
        with pytest.raises(ValueError, match=r"card\[1\]: missing field english"):
            load_deck(path)

    def test_cards_must_be_list(self, workspace_dir: Path):
        with pytest.raises(ValueError):
            load_deck(_write_deck(workspace_dir / "deck.json", {"cards": "dog"}))

    def test_null_uid_and_pos_fall_back(self, workspace_dir: Path):
        deck = load_deck(
            _write_deck(workspace_dir / "deck.json", {"cards": [{"uid": None, "pos": None, "english": "dog"}]})
        )

        assert deck.cards[0].uid == 1
        assert deck.cards[0].pos == ""

    @pytest.mark.parametrize("uid", ["abc", [1], True, 1.5])
    def test_invalid_uid(self, workspace_dir: Path, uid):
        path = _write_deck(workspace_dir / "deck.json", {"cards": [{"uid": uid, "english": "dog"}]})
        with pytest.raises(ValueError, match=r"card\[0\]: invalid uid"):
            load_deck(path)

    def test_numeric_string_uid(self, workspace_dir: Path):
        deck = load_deck(_write_deck(workspace_dir / "deck.json", {"cards": [{"uid": "7", "english": "dog"}]}))
        assert deck.cards[0].uid == 7

    def test_null_deck_fields_use_defaults(self, workspace_dir: Path):
        deck = load_deck(
            _write_deck(
                workspace_dir / "deck.json",
                {"title": None, "layout": None, "image_size": None, "cards": [{"english": "dog"}]},
            )
        )
        assert deck.title == "Flash Cards"
        assert deck.layout == DEFAULT_LAYOUT
        assert deck.image_size == DEFAULT_IMAGE_SIZE
