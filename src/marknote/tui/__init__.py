"""Curses front-end."""
