"""Theta sketches for approximate distinct counting, with MurmurHash3 hashing and a demo command."""

__version__ = "0.2.0"
__all__ = ["hashing", "hash_table", "sketch", "demo"]