"""Image composition commands.

- build: merge selected packages into the image tree
- inspect: show per-package layout decisions without writing
- layers: list the layer catalog
"""
