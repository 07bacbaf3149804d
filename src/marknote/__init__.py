"""marknote — keyboard-driven terminal notes and tasks."""

__version__ = "0.1.0"
