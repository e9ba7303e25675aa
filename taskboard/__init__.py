"""Task dashboard core: state, load cycle, device events and commands."""

__version__ = "0.1.0"
