"""Tests for blood color lookup."""

from __future__ import annotations

import logging

import pytest

from bleedout.color_resolver import (
    ColorNotFound,
    UnrecognizedColor,
    color_from_name,
    get_rgba,
    lookup_blood_color,
    resolve_color,
    to_rgba,
)
from bleedout.settings import SplatSettings

BLOOD_RGBA = "rgba(138, 7, 7, 0.7)"


def test_to_rgba() -> None:
    assert to_rgba((1, 2, 3), 0.5) == "rgba(1, 2, 3, 0.5)"


def test_get_rgba_unknown_name_is_none() -> None:
    assert get_rgba("notacolor") is None
    assert get_rgba("red") == "rgba(255, 0, 0, 0.7)"


class TestColorFromName:
    def test_finds_color_word(self) -> None:
        assert color_from_name("Giant Purple Worm") == "rgba(128, 0, 128, 0.7)"

    def test_is_case_insensitive(self) -> None:
        assert color_from_name("GREEN slime") == "rgba(0, 128, 0, 0.7)"

    def test_no_color_word_raises(self) -> None:
        with pytest.raises(ColorNotFound):
            color_from_name("Ancient Wyrm")


class TestResolveColor:
    def test_named_color(self) -> None:
        assert resolve_color("darkred") == "rgba(139, 0, 0, 0.7)"

    def test_rgba_passes_through(self) -> None:
        assert resolve_color("rgba(85, 107, 47, 0.7)") == "rgba(85, 107, 47, 0.7)"

    def test_name_lookup(self) -> None:
        assert resolve_color("name", "Red Dragon Wyrmling") == "rgba(255, 0, 0, 0.7)"

    def test_garbage_raises(self) -> None:
        with pytest.raises(UnrecognizedColor):
            resolve_color("rgba(1, 2, 3")


class TestLookupBloodColor:
    """Tests for lookup_blood_color."""

    def test_unknown_type_bleeds_blood(self) -> None:
        assert lookup_blood_color("kobold", "Kobold", SplatSettings()) == BLOOD_RGBA

    def test_missing_type_bleeds_blood(self) -> None:
        assert lookup_blood_color(None, "Bob", SplatSettings()) == BLOOD_RGBA

    def test_type_color(self) -> None:
        assert (
            lookup_blood_color("Undead", "Zombie", SplatSettings())
            == "rgba(139, 0, 0, 0.7)"
        )

    def test_bloodless_type(self) -> None:
        assert lookup_blood_color("construct", "Iron Golem", SplatSettings()) == "none"

    def test_name_derived_type(self) -> None:
        assert (
            lookup_blood_color("ooze", "Black Pudding", SplatSettings())
            == "rgba(0, 0, 0, 0.7)"
        )

    def test_name_lookup_failure_falls_back_to_blood(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="bleedout.color_resolver"):
            color = lookup_blood_color("ooze", "Gelatinous Cube", SplatSettings())
        assert color == BLOOD_RGBA
        assert "Gelatinous Cube" in caplog.text

    def test_blood_color_disabled_ignores_type(self) -> None:
        settings = SplatSettings(use_blood_color=False)
        assert lookup_blood_color("undead", "Zombie", settings) == BLOOD_RGBA
        assert lookup_blood_color("construct", "Iron Golem", settings) == BLOOD_RGBA
