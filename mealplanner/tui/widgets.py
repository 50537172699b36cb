"""Key status indicator and manual key setup form."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Input, Label, Static

from mealplanner.credentials.kinds import REQUIRED_KINDS, CredentialKind
from mealplanner.credentials.status import KeyStatus, key_statuses
from mealplanner.credentials.store import CredentialStore
from mealplanner.display.console import status_dot

logger = logging.getLogger(__name__)


class KeyStatusIndicator(Static):
    """A row of coloured availability dots, one per credential kind."""

    DEFAULT_CSS = """
    KeyStatusIndicator {
        height: 1;
        padding: 0 1;
        background: $boost;
    }
    """

    def __init__(
        self,
        store: CredentialStore,
        kinds: Optional[List[CredentialKind]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__("", **kwargs)
        self._store = store
        self._kinds = kinds or list(REQUIRED_KINDS)
        self.statuses: List[KeyStatus] = []

    def on_mount(self) -> None:
        self.refresh_status()

    def refresh_status(self) -> None:
        self.statuses = key_statuses(self._store, self._kinds)
        line = Text()
        for i, status in enumerate(self.statuses):
            if i:
                line.append("  ")
            line.append_text(status_dot(status))
        self.update(line)


class KeySetupForm(Widget):
    """Password inputs for the USDA and Claude keys.

    Saving stores every non-empty field; the form is cleared only when all
    of them were stored.  Save stays disabled while the USDA field is empty.
    """

    DEFAULT_CSS = """
    KeySetupForm {
        height: auto;
        border: round $accent;
        padding: 0 1;
    }
    KeySetupForm > Vertical {
        height: auto;
    }
    #setup-title {
        text-style: bold;
        color: $primary;
    }
    .setup-hint {
        color: $text-muted;
        margin-bottom: 1;
    }
    #setup-actions {
        height: 3;
    }
    #setup-actions Button {
        margin-right: 1;
    }
    """

    class Saved(Message):
        """Posted after a save attempt."""

        def __init__(self, success: bool, *, demo: bool = False) -> None:
            super().__init__()
            self.success = success
            self.demo = demo

    def __init__(self, store: CredentialStore, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._store = store

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label("[b]API Key Setup[/b]", id="setup-title")
            yield Label("USDA Food Database")
            yield Input(id="usda-input", password=True, placeholder="USDA API Key")
            yield Static("Get your free API key from api.nal.usda.gov", classes="setup-hint")
            yield Label("Claude AI (Optional)")
            yield Input(id="claude-input", password=True, placeholder="Claude API Key")
            yield Static("Required for AI meal planning features", classes="setup-hint")
            with Horizontal(id="setup-actions"):
                yield Button(
                    "Save API Keys Securely", id="btn-save", variant="primary", disabled=True
                )
                yield Button("Use Demo Mode", id="btn-demo", variant="warning")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "usda-input":
            self.query_one("#btn-save", Button).disabled = not event.value

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            self.save_keys()
        elif event.button.id == "btn-demo":
            self.post_message(self.Saved(self._store.set_demo_mode(), demo=True))

    def save_keys(self) -> bool:
        usda_input = self.query_one("#usda-input", Input)
        claude_input = self.query_one("#claude-input", Input)

        success = True
        if usda_input.value:
            success = self._store.store(CredentialKind.USDA, usda_input.value) and success
        if claude_input.value:
            success = self._store.store(CredentialKind.CLAUDE, claude_input.value) and success

        if success:
            usda_input.value = ""
            claude_input.value = ""
        else:
            logger.warning("Manual key setup: at least one key could not be stored")
        self.post_message(self.Saved(success))
        return success
