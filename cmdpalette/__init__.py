"""cmdpalette - Command palette search and ranking engine.

Turns a free-text query into a ranked, categorized, keyboard-navigable
list of commands, with an inline arithmetic evaluator.

Layers:
    - core: Configuration, logging, exceptions, action dispatch
    - engine: Registry, fuzzy matching, calculator, search, recency
    - gui: Interaction state machine and keyboard surface
"""

__version__ = "0.1.0"
