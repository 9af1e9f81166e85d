"""
Klondike - Solitaire Game Engine

An immutable, rules-driven engine for Klondike solitaire.
The engine provides:
- Immutable game state with unlimited undo
- Legal move evaluation
- Auto-move and auto-complete
- Session hosting and bot play-outs
"""

__version__ = "0.1.0"
