from __future__ import annotations

import webbrowser
from typing import Protocol


class UrlOpener(Protocol):
    def open(self, url: str) -> bool:
        """Fire-and-forget; returns False if no browser could be launched."""
        ...


class BrowserOpener:
    def open(self, url: str) -> bool:
        return webbrowser.open(url, new=2)
