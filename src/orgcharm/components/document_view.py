"""Document view: one connection's scrollable, animated view of a document."""

from __future__ import annotations

import asyncio
import logging
import random
import threading
from typing import Callable

from orgcharm.animation.state import AnimationState
from orgcharm.config import ViewerConfig
from orgcharm.highlight import PygmentsHighlighter, SyntaxHighlightFn
from orgcharm.keybindings import ViewerKeybindingsManager, get_viewer_keybindings
from orgcharm.nodes import Document
from orgcharm.render import Renderer
from orgcharm.theme import StyleRole, Theme, default_theme
from orgcharm.utils import truncate_to_width

logger = logging.getLogger(__name__)

# Rows taken by the header and footer around the viewport.
HEADER_HEIGHT = 4
FOOTER_HEIGHT = 3
# Columns taken by the frame around the rendered document.
CONTENT_MARGIN = 8
FRAME_INDENT = "  "

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Navigation",
        (
            ("↑ / k", "Scroll up"),
            ("↓ / j", "Scroll down"),
            ("g / Home", "Go to top"),
            ("G / End", "Go to bottom"),
        ),
    ),
    (
        "Document View",
        (
            ("Page Up / Ctrl+u", "Page up"),
            ("Page Down / Ctrl+d", "Page down"),
            ("r", "Toggle raw/rendered view"),
        ),
    ),
    (
        "General",
        (
            ("?", "Toggle this help"),
            ("q / Ctrl+c", "Quit"),
        ),
    ),
)


class DocumentView:
    """Scrollable view of a single :class:`Document`.

    Each connection owns its own view: size, scroll position, raw/rendered
    toggle, help overlay, render cache and animation.  Input and animation
    ticks both mutate that state and are serialised by a per-view lock.

    Ticks run on the asyncio loop that is running when an animation starts;
    without a running loop the animation is only advanced by explicit
    :meth:`tick` calls.
    """

    def __init__(
        self,
        document: Document,
        *,
        config: ViewerConfig | None = None,
        theme: Theme | None = None,
        highlighter: SyntaxHighlightFn | None = None,
        keybindings: ViewerKeybindingsManager | None = None,
        request_render: Callable[[], None] | None = None,
        on_quit: Callable[[], None] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.document = document
        self.config = config or ViewerConfig()
        self.theme = theme or default_theme()
        self.keybindings = keybindings or get_viewer_keybindings()
        self.request_render = request_render
        self.on_quit = on_quit

        self._renderer = Renderer(self.theme, highlighter or PygmentsHighlighter(self.config.code_style))
        self._rng = rng or random.Random()
        self._lock = threading.RLock()

        self.width = 0
        self.height = 0
        self.scroll_offset = 0
        self.raw_view = False
        self.show_help = False
        self.animation = AnimationState(spring=self.config.make_spring())

        self._sized = False
        self._cache: dict[tuple[int, bool], list[str]] = {}
        self._timer_handle: asyncio.TimerHandle | None = None

    # -- geometry -----------------------------------------------------------

    @property
    def content_width(self) -> int:
        return max(1, self.width - CONTENT_MARGIN)

    @property
    def viewport_height(self) -> int:
        return max(1, self.height - HEADER_HEIGHT - FOOTER_HEIGHT)

    def _content_lines(self) -> list[str]:
        key = (self.content_width, self.raw_view)
        lines = self._cache.get(key)
        if lines is None:
            if self.raw_view:
                text = self.document.raw_content
            else:
                text = self._renderer.render(self.document.nodes, self.content_width)
            lines = text.rstrip("\n").split("\n")
            self._cache[key] = lines
        return lines

    def _max_offset(self) -> int:
        return max(0, len(self._content_lines()) - self.viewport_height)

    def scroll_percent(self) -> float:
        max_offset = self._max_offset()
        if max_offset == 0:
            return 1.0
        return min(1.0, self.scroll_offset / max_offset)

    def _viewport_text(self) -> str:
        lines = self._content_lines()[self.scroll_offset : self.scroll_offset + self.viewport_height]
        limit = self.width - len(FRAME_INDENT)
        lines = [truncate_to_width(line, limit, ellipsis="") for line in lines]
        lines.extend([""] * (self.viewport_height - len(lines)))
        return "\n".join(lines)

    # -- component protocol -------------------------------------------------

    def invalidate(self) -> None:
        with self._lock:
            self._cache.clear()

    def render(self, width: int) -> list[str]:
        with self._lock:
            if width != self.width:
                self.width = width
                self._clamp_scroll()
            if not self._sized:
                return [self.theme.apply(StyleRole.HELP_TEXT, "Loading...")]
            if self.show_help:
                return self._render_help()
            return self._render_frame()

    def handle_input(self, data: str) -> None:
        quit_requested = False
        with self._lock:
            action = self.keybindings.action_for(data)

            if action == "toggleHelp":
                self.show_help = not self.show_help
            elif self.show_help:
                # Any key closes the help overlay.
                self.show_help = False
            elif action == "quit":
                quit_requested = True
            elif action == "scrollUp":
                self._scroll_by(-self.config.scroll_step)
            elif action == "scrollDown":
                self._scroll_by(self.config.scroll_step)
            elif action == "pageUp":
                self._scroll_by(-self.viewport_height)
            elif action == "pageDown":
                self._scroll_by(self.viewport_height)
            elif action == "gotoTop":
                self.scroll_offset = 0
            elif action == "gotoBottom":
                self.scroll_offset = self._max_offset()
            elif action == "toggleRaw":
                self._toggle_raw()
            else:
                return

        if quit_requested:
            self.stop()
            if self.on_quit:
                self.on_quit()
            return
        self._request_render()

    def resize(self, width: int, height: int) -> None:
        """Record a new terminal size; the first size starts the reveal."""
        with self._lock:
            first = not self._sized
            self.width = width
            self.height = height
            self._sized = True
            self._clamp_scroll()
            logger.debug("Document view %r resized to %dx%d", self.document.name, width, height)
            if first and self.config.animations:
                self.animation.start("reveal", to_content=self._viewport_text())
                self._schedule_tick()
        self._request_render()

    def set_document(self, document: Document) -> None:
        with self._lock:
            self.document = document
            self._cache.clear()
            self.scroll_offset = 0
        self._request_render()

    # -- scrolling ----------------------------------------------------------

    def _scroll_by(self, delta: int) -> None:
        self.scroll_offset += delta
        self._clamp_scroll()

    def _clamp_scroll(self) -> None:
        if not self._sized:
            return
        self.scroll_offset = min(max(0, self.scroll_offset), self._max_offset())

    def _toggle_raw(self) -> None:
        before = self._viewport_text()
        self.raw_view = not self.raw_view
        self.scroll_offset = 0
        if self.config.animations:
            self.animation.start("transition", from_content=before, to_content=self._viewport_text())
            self._schedule_tick()

    # -- animation ----------------------------------------------------------

    def tick(self) -> bool:
        """Advance the animation one step; return True while it is running."""
        with self._lock:
            return self.animation.tick()

    def _schedule_tick(self) -> None:
        if self._timer_handle is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timer_handle = loop.call_later(self.config.tick_interval, self._on_tick)

    def _on_tick(self) -> None:
        self._timer_handle = None
        if self.tick():
            self._schedule_tick()
        self._request_render()

    def stop(self) -> None:
        """Cancel any pending tick and end the running animation."""
        with self._lock:
            if self._timer_handle is not None:
                self._timer_handle.cancel()
                self._timer_handle = None
            self.animation.stop()

    def _request_render(self) -> None:
        if self.request_render is not None:
            self.request_render()

    # -- drawing ------------------------------------------------------------

    def _render_header(self) -> str:
        doc = self.document
        text = "📄 " + doc.title
        if doc.author:
            text += " — " + doc.author
        if doc.date:
            text += " (" + doc.date + ")"
        return self.theme.apply(StyleRole.HEADER, truncate_to_width(text, max(1, self.width - CONTENT_MARGIN)))

    def _render_help_bar(self, items: list[tuple[str, str]]) -> str:
        parts = [
            self.theme.apply(StyleRole.HELP_KEY, key) + " " + self.theme.apply(StyleRole.HELP_TEXT, desc)
            for key, desc in items
        ]
        return self.theme.apply(StyleRole.HELP_TEXT, " • ").join(parts)

    def _render_footer(self) -> str:
        percent = f"{self.scroll_percent() * 100:3.0f}%"
        scroll_info = self.theme.apply(StyleRole.STATUS_BAR, f" {percent} ")
        toggle = "rendered" if self.raw_view else "raw"
        help_bar = self._render_help_bar([("↑/↓", "scroll"), ("r", toggle), ("?", "help"), ("q", "quit")])
        return scroll_info + "  " + help_bar

    def _render_frame(self) -> list[str]:
        body = self._viewport_text()
        if self.animation.active:
            # The target frame follows the live viewport.
            self.animation.to_content = body
            body = self.animation.frame(self.content_width, self.viewport_height, self._rng)

        footer = truncate_to_width(self._render_footer(), max(1, self.width - len(FRAME_INDENT)))
        lines = [FRAME_INDENT + self._render_header(), ""]
        lines.extend(FRAME_INDENT + line for line in body.split("\n"))
        lines.append("")
        lines.append(FRAME_INDENT + footer)
        return lines

    def _render_help(self) -> list[str]:
        theme = self.theme
        lines = [theme.apply(StyleRole.HELP_TITLE, "  ⌨️  Keyboard Shortcuts"), ""]
        for name, items in HELP_SECTIONS:
            lines.append(theme.apply(StyleRole.HEADING_3, "  " + name))
            for key, desc in items:
                lines.append(
                    "    " + theme.apply(StyleRole.HELP_KEY, f"{key:<20}") + theme.apply(StyleRole.HELP_TEXT, desc)
                )
            lines.append("")
        lines.append("")
        lines.append(theme.apply(StyleRole.HELP_TEXT, "  Press any key to close this help"))
        return lines
