"""
Terminal Themes.

Green light and dark themes for the note app, and detection of the
terminal's own light/dark setting for the "follow system" choice.
"""

import os

from textual.theme import Theme

LIGHT_THEME_NAME = "noteapp-light"
DARK_THEME_NAME = "noteapp-dark"

LIGHT_THEME = Theme(
    name=LIGHT_THEME_NAME,
    primary="#2E7D32",
    secondary="#66BB6A",
    accent="#A5D6A7",
    foreground="#1B1B1B",
    background="#F6FBF4",
    surface="#FFFFFF",
    panel="#E8F5E9",
    success="#388E3C",
    warning="#F9A825",
    error="#C62828",
    dark=False,
)

DARK_THEME = Theme(
    name=DARK_THEME_NAME,
    primary="#8AC78E",
    secondary="#4CAF50",
    accent="#1B5E20",
    foreground="#E2E3DD",
    background="#121411",
    surface="#1A1C19",
    panel="#243024",
    success="#81C784",
    warning="#FFD54F",
    error="#EF9A9A",
    dark=True,
)


def theme_name(is_dark: bool) -> str:
    return DARK_THEME_NAME if is_dark else LIGHT_THEME_NAME


def detect_system_dark_mode(default: bool) -> bool:
    """
    Guess whether the terminal uses a dark background.

    Reads COLORFGBG ("fg;bg" or "fg;default;bg", set by rxvt, Konsole and
    others). Background colors 0-6 and 8 are dark. Falls back to default
    when the variable is absent or unreadable.
    """
    value = os.environ.get("COLORFGBG", "")
    background = value.rsplit(";", 1)[-1]
    if not background.isdigit():
        return default
    return int(background) in (0, 1, 2, 3, 4, 5, 6, 8)
