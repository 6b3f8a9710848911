"""Test helper modules for the Plasma test suite.

- packages: lay out fake package caches (legacy and modern layouts)
- io_utils: YAML config writers
"""
