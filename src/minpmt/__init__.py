"""min-pmt: markdown tickets managed from the CLI, a web board, or an MCP client."""

from minpmt._version import version as __version__

__all__ = ["__version__"]
