"""CLI tools for producer-connect.

- ``python -m src.cli "<artist>"`` -- find the producers credited on an
  artist's songs and print a ranked report (``--json`` for JSON).
"""
