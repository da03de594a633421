"""Viewer keybindings manager."""

from __future__ import annotations

from typing import Literal

from orgcharm.keys import KeyId, matches_key

ViewerAction = Literal[
    # Scrolling
    "scrollUp",
    "scrollDown",
    "pageUp",
    "pageDown",
    "gotoTop",
    "gotoBottom",
    # View
    "toggleRaw",
    "toggleHelp",
    # Session
    "quit",
]

ViewerKeybindingsConfig = dict[ViewerAction, KeyId | list[KeyId]]

DEFAULT_VIEWER_KEYBINDINGS: dict[ViewerAction, KeyId | list[KeyId]] = {
    # Scrolling
    "scrollUp": ["up", "k"],
    "scrollDown": ["down", "j"],
    "pageUp": ["pageUp", "ctrl+u"],
    "pageDown": ["pageDown", "ctrl+d"],
    "gotoTop": ["home", "g"],
    "gotoBottom": ["end", "G"],
    # View
    "toggleRaw": "r",
    "toggleHelp": "?",
    # Session
    "quit": ["q", "ctrl+c"],
}


class ViewerKeybindingsManager:
    """Manages keybindings for the document viewer."""

    def __init__(self, config: ViewerKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[ViewerAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ViewerKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        # Start with defaults
        for action, keys in DEFAULT_VIEWER_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # Override with user config
        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: ViewerAction) -> bool:
        """Check if input matches a specific action."""
        keys = self._action_to_keys.get(action)
        if not keys:
            return False
        for key in keys:
            if matches_key(data, key):
                return True
        return False

    def action_for(self, data: str) -> ViewerAction | None:
        """Return the first action bound to *data*, if any."""
        for action in self._action_to_keys:
            if self.matches(data, action):
                return action
        return None

    def get_keys(self, action: ViewerAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: ViewerKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)


_global_viewer_keybindings: ViewerKeybindingsManager | None = None


def get_viewer_keybindings() -> ViewerKeybindingsManager:
    global _global_viewer_keybindings
    if _global_viewer_keybindings is None:
        _global_viewer_keybindings = ViewerKeybindingsManager()
    return _global_viewer_keybindings


def set_viewer_keybindings(manager: ViewerKeybindingsManager) -> None:
    global _global_viewer_keybindings
    _global_viewer_keybindings = manager
