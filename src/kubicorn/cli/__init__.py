"""CLI layer — argument parsing, dispatch, output and error boundary.

This package is the outermost layer.  It may import from ``core``,
``infra`` and ``utils``; no other layer imports from ``cli``.
"""
