"""GUI package - Palette interaction layer.

Owns palette state and keyboard handling. Drawing the palette is left
to the host toolkit.

Modules:
    - controller: Interaction state machine
    - keys: Key presses and shortcut chords
    - shortcuts: tkinter key binding
"""
