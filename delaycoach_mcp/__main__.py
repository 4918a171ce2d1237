"""Entry point for ``python -m delaycoach_mcp``."""

from delaycoach_mcp.server import run

run()
