"""org-charm: render org documents to styled terminal text, with animated transitions."""

# Animation
from orgcharm.animation import (
    AnimationKind,
    AnimationState,
    Spring,
    default_spring,
    fps,
    reveal,
    transition,
)

# Components
from orgcharm.components import DocumentView

# Configuration
from orgcharm.config import ConfigError, ViewerConfig

# Highlighting
from orgcharm.highlight import PygmentsHighlighter, SyntaxHighlightFn, plain_highlighter

# Keybindings
from orgcharm.keybindings import (
    DEFAULT_VIEWER_KEYBINDINGS,
    ViewerAction,
    ViewerKeybindingsManager,
    get_viewer_keybindings,
    set_viewer_keybindings,
)

# Keyboard input handling
from orgcharm.keys import Key, KeyId, matches_key, parse_key

# Document model
from orgcharm.nodes import Document

# Rendering
from orgcharm.render import Renderer, render

# Theme
from orgcharm.theme import Style, StyleRole, Theme, default_theme, plain_theme

# Utilities
from orgcharm.utils import iter_cells, strip_styling, visual_length

__all__ = [
    # Animation
    "AnimationKind",
    "AnimationState",
    "Spring",
    "default_spring",
    "fps",
    "reveal",
    "transition",
    # Components
    "DocumentView",
    # Configuration
    "ConfigError",
    "ViewerConfig",
    # Highlighting
    "PygmentsHighlighter",
    "SyntaxHighlightFn",
    "plain_highlighter",
    # Keybindings
    "DEFAULT_VIEWER_KEYBINDINGS",
    "ViewerAction",
    "ViewerKeybindingsManager",
    "get_viewer_keybindings",
    "set_viewer_keybindings",
    # Keys
    "Key",
    "KeyId",
    "matches_key",
    "parse_key",
    # Document model
    "Document",
    # Rendering
    "Renderer",
    "render",
    # Theme
    "Style",
    "StyleRole",
    "Theme",
    "default_theme",
    "plain_theme",
    # Utilities
    "iter_cells",
    "strip_styling",
    "visual_length",
]
