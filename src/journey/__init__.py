"""My Journey: a personal task list with a live summary widget."""

__version__ = "0.1.0"
