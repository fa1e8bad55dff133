"""Interactive collaborators: the text editor and the browser."""

from cutrelease.tools.browser import BrowserOpener, UrlOpener
from cutrelease.tools.editor import CommandEditor, Editor, resolve_editor_command

__all__ = [
    "BrowserOpener",
    "CommandEditor",
    "Editor",
    "UrlOpener",
    "resolve_editor_command",
]
