"""Tests for orgcharm.keybindings -- action lookup."""

from __future__ import annotations

import pytest

from orgcharm.keybindings import (
    DEFAULT_VIEWER_KEYBINDINGS,
    ViewerKeybindingsManager,
    get_viewer_keybindings,
    set_viewer_keybindings,
)


class TestViewerKeybindingsManager:
    @pytest.mark.parametrize(
        ("data", "action"),
        [
            ("k", "scrollUp"),
            ("\x1b[A", "scrollUp"),
            ("j", "scrollDown"),
            ("\x1b[B", "scrollDown"),
            ("\x1b[5~", "pageUp"),
            ("\x15", "pageUp"),
            ("\x1b[6~", "pageDown"),
            ("\x04", "pageDown"),
            ("g", "gotoTop"),
            ("\x1b[H", "gotoTop"),
            ("G", "gotoBottom"),
            ("\x1b[F", "gotoBottom"),
            ("r", "toggleRaw"),
            ("?", "toggleHelp"),
            ("q", "quit"),
            ("\x03", "quit"),
        ],
    )
    def test_default_actions(self, data: str, action: str) -> None:
        assert ViewerKeybindingsManager().action_for(data) == action

    def test_unbound_input(self) -> None:
        assert ViewerKeybindingsManager().action_for("z") is None

    def test_override_replaces_keys(self) -> None:
        manager = ViewerKeybindingsManager({"quit": "x"})
        assert manager.action_for("x") == "quit"
        assert manager.action_for("q") is None
        assert manager.get_keys("quit") == ["x"]

    def test_set_config_rebuilds_from_defaults(self) -> None:
        manager = ViewerKeybindingsManager({"quit": "x"})
        manager.set_config({"toggleRaw": ["R", "v"]})
        assert manager.matches("q", "quit")
        assert manager.matches("v", "toggleRaw")
        assert not manager.matches("r", "toggleRaw")

    def test_defaults_not_mutated(self) -> None:
        manager = ViewerKeybindingsManager()
        manager.get_keys("scrollUp").append("w")
        assert DEFAULT_VIEWER_KEYBINDINGS["scrollUp"] == ["up", "k"]


class TestGlobalKeybindings:
    def test_set_and_get(self) -> None:
        previous = get_viewer_keybindings()
        custom = ViewerKeybindingsManager({"quit": "x"})
        try:
            set_viewer_keybindings(custom)
            assert get_viewer_keybindings() is custom
        finally:
            set_viewer_keybindings(previous)
