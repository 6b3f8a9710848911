"""Plasma core library (configuration, paths, composition)."""
