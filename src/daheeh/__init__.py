"""Local-first identity and progression core for the Daheeh study companion."""

__version__ = "0.1.0"
