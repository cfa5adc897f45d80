"""Shared utilities — logging setup and filesystem locations.

Rules
-----
* No business logic.
* Importable by any layer.
"""
