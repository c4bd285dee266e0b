"""
Rule engine, game state machine and lobby server for the Thirteen card game.
"""

__version__ = "1.0.0"
