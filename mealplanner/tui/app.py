"""MealPlanner key-setup TUI.

Shows the key status indicator above the manual setup form and refreshes
it after every save.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from mealplanner.constants import APP_NAME, APP_VERSION
from mealplanner.credentials.kinds import CredentialKind
from mealplanner.credentials.migration import is_setup_complete
from mealplanner.credentials.store import CredentialStore
from mealplanner.tui.widgets import KeySetupForm, KeyStatusIndicator

logger = logging.getLogger(__name__)


class KeySetupApp(App):
    """Textual front end for storing the app's API keys."""

    TITLE = f"{APP_NAME} v{APP_VERSION}"
    SUB_TITLE = "API key setup"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh_status", "Refresh"),
    ]

    def __init__(
        self, store: CredentialStore, kinds: Optional[List[CredentialKind]] = None
    ) -> None:
        super().__init__()
        self._store = store
        self._kinds = kinds

    def compose(self) -> ComposeResult:
        yield Header()
        yield KeyStatusIndicator(self._store, self._kinds, id="key-status")
        yield KeySetupForm(self._store, id="key-setup")
        yield Footer()

    def on_mount(self) -> None:
        if is_setup_complete(self._store):
            self.sub_title = "API keys secured"

    def action_refresh_status(self) -> None:
        self.query_one(KeyStatusIndicator).refresh_status()

    def on_key_setup_form_saved(self, message: KeySetupForm.Saved) -> None:
        self.action_refresh_status()
        if message.demo:
            if message.success:
                self.notify("USDA food search switched to demo mode.")
            else:
                self.notify("Could not switch to demo mode.", severity="error")
        elif message.success:
            self.notify("Your API keys have been stored in secure storage.")
        else:
            self.notify("Some keys could not be stored.", severity="error")
        self.sub_title = "API keys secured" if is_setup_complete(self._store) else "API key setup"
