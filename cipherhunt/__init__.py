"""
CipherHunt - Puzzle-gated interactive story engine.

A deterministic engine for branching treasure hunts. Creators author a
story graph of nodes and cipher puzzles; players traverse it by solving
encoded clues. The engine provides:
- A registry of reversible puzzle ciphers
- Puzzle evaluation and hint accounting
- Draft graph authoring with two-phase publish
- A play state machine over persisted progress
"""

__version__ = "0.1.0"
