"""Keyboard binding between a tkinter window and the palette controller."""

import tkinter as tk
from typing import Any, Optional

from cmdpalette.core.logging import get_logger
from cmdpalette.gui.controller import PaletteController
from cmdpalette.gui.keys import KeyPress

logger = get_logger(__name__)

# All key presses go through the controller, which does exact modifier
# matching itself; tk's own sequences would also fire for extra modifiers.
SEQUENCES: tuple[str, ...] = ("<KeyPress>",)

# (sequence, funcid) pairs from root.bind, kept for unbinding
_bound_sequences: list[tuple[str, str]] = []


def bind_shortcuts(root: Any, controller: PaletteController) -> None:
    """Route key presses on root to the palette controller.

    A press the controller consumes stops propagating. Bindings the host
    already has on the same sequences are kept.

    Args:
        root: The root Tk window (anything with bind/unbind)
        controller: Palette controller receiving the presses
    """
    global _bound_sequences
    _bound_sequences = []

    def on_key(event: Optional[tk.Event] = None) -> Optional[str]:
        if event is None:
            return None
        if controller.handle_key(KeyPress.from_tk_event(event)):
            return "break"  # prevent further propagation
        return None

    for sequence in SEQUENCES:
        funcid = root.bind(sequence, on_key, add="+")
        _bound_sequences.append((sequence, funcid))
        logger.debug(
            "Shortcut bound",
            extra={"context": {"sequence": sequence, "funcid": funcid}},
        )

    logger.info(
        "Palette keys bound",
        extra={"context": {"count": len(_bound_sequences)}},
    )


def _remove_script(root: Any, sequence: str, funcid: str) -> None:
    # Tk keeps one script per sequence; each handler added with add="+"
    # is its own line starting with a call to its funcid.
    prefix = f'if {{"[{funcid} '
    script = root.bind(sequence) or ""
    kept = [line for line in script.split("\n") if line and not line.startswith(prefix)]
    root.bind(sequence, "\n".join(kept) + "\n" if kept else "")
    root.deletecommand(funcid)


def unbind_shortcuts(root: Any) -> None:
    """Remove the palette's key handlers, leaving other bindings in place."""
    global _bound_sequences
    for sequence, funcid in _bound_sequences:
        try:
            _remove_script(root, sequence, funcid)
        except tk.TclError:
            pass
    count = len(_bound_sequences)
    _bound_sequences = []
    logger.debug("Shortcuts unbound", extra={"context": {"count": count}})
