"""Allow ``python -m kubicorn`` invocation.

Delegates to the CLI error boundary so that ``python -m kubicorn``
behaves identically to the ``kubicorn`` console script.
"""

from __future__ import annotations

from kubicorn.cli.app import cli

if __name__ == "__main__":
    cli()
