"""Framed link-layer packets sent over raw sockets or BPF devices."""

__version__ = "0.1.0"

__all__ = ["__version__"]