"""Key presses and shortcut chords.

Key names are normalised so that browser-style names ("ArrowDown"),
tkinter keysyms ("Down", "Return") and chord text ("meta+k") compare
equal. Shortcut matching requires the exact modifier set: ctrl+shift+k
does not trigger a ctrl+k shortcut.
"""

import sys
from dataclasses import dataclass
from typing import Any

from cmdpalette.core.exceptions import ConfigurationError

ARROW_DOWN = "ArrowDown"
ARROW_UP = "ArrowUp"
TAB = "Tab"
ENTER = "Enter"
ESCAPE = "Escape"
SPACE = "Space"

_KEY_ALIASES = {
    "down": ARROW_DOWN,
    "arrowdown": ARROW_DOWN,
    "up": ARROW_UP,
    "arrowup": ARROW_UP,
    "left": "ArrowLeft",
    "arrowleft": "ArrowLeft",
    "right": "ArrowRight",
    "arrowright": "ArrowRight",
    "tab": TAB,
    "iso_left_tab": TAB,
    "return": ENTER,
    "enter": ENTER,
    "kp_enter": ENTER,
    "escape": ESCAPE,
    "esc": ESCAPE,
    "space": SPACE,
    " ": SPACE,
}

_MODIFIER_ALIASES = {
    "meta": "meta",
    "cmd": "meta",
    "command": "meta",
    "super": "meta",
    "win": "meta",
    "ctrl": "ctrl",
    "control": "ctrl",
    "alt": "alt",
    "option": "alt",
    "opt": "alt",
    "shift": "shift",
}

MODIFIERS = frozenset(("meta", "ctrl", "alt", "shift"))

# tkinter event.state bits
TK_SHIFT = 0x0001
TK_CONTROL = 0x0004
if sys.platform == "darwin":
    TK_META = 0x0008
    TK_ALT = 0x0010
else:
    TK_ALT = 0x0008
    TK_META = 0x0040


def normalize_key(key: str) -> str:
    """Canonical name for a key: named keys title-cased, characters lower."""
    if not key:
        return ""
    alias = _KEY_ALIASES.get(key.lower()) if len(key) > 1 or key == " " else None
    if alias:
        return alias
    return key.lower() if len(key) == 1 else key


@dataclass(frozen=True)
class KeyPress:
    """One key event with its modifier state."""

    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    meta: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", normalize_key(self.key))

    @property
    def modifiers(self) -> frozenset[str]:
        active = {
            "ctrl": self.ctrl,
            "alt": self.alt,
            "shift": self.shift,
            "meta": self.meta,
        }
        return frozenset(name for name, on in active.items() if on)

    @classmethod
    def from_tk_event(cls, event: Any) -> "KeyPress":
        """Build from a tkinter key event (keysym and state bitmask)."""
        state = int(getattr(event, "state", 0) or 0)
        keysym = getattr(event, "keysym", "") or ""
        return cls(
            key=keysym,
            ctrl=bool(state & TK_CONTROL),
            alt=bool(state & TK_ALT),
            shift=bool(state & TK_SHIFT) or keysym == "ISO_Left_Tab",
            meta=bool(state & TK_META),
        )


@dataclass(frozen=True)
class Shortcut:
    """A key plus an exact modifier set."""

    key: str
    modifiers: frozenset[str] = frozenset()

    @classmethod
    def parse(cls, chord: str) -> "Shortcut":
        """Parse text like "meta+k", "ctrl+shift+p" or "cmd+space".

        Raises:
            ConfigurationError: If the chord is empty, has no key, or
                names an unknown modifier
        """
        parts = [p.strip() for p in chord.split("+")] if chord else []
        if not parts or not parts[-1]:
            raise ConfigurationError(f"Shortcut {chord!r} has no key")
        *mods, key = parts
        modifiers = set()
        for mod in mods:
            name = _MODIFIER_ALIASES.get(mod.lower())
            if name is None:
                raise ConfigurationError(f"Unknown modifier {mod!r} in shortcut {chord!r}")
            modifiers.add(name)
        return cls(key=normalize_key(key), modifiers=frozenset(modifiers))

    def matches(self, press: KeyPress) -> bool:
        return press.key.lower() == self.key.lower() and press.modifiers == self.modifiers

    def __str__(self) -> str:
        order = ("ctrl", "alt", "shift", "meta")
        return "+".join([m for m in order if m in self.modifiers] + [self.key])
