"""Extract Apple Health mindful sessions into a Bloom-importable CSV."""

__version__ = "0.1.0"
