"""Shared utilities for Plasma core (I/O, merging, paths)."""
