"""
Water Softener Sizing MCP Server Tools

This module contains the tank catalog and sizing calculator used by the
MCP server.
"""

# Tools are imported directly in server.py to maintain independence
# This file is kept minimal to prevent circular imports

__all__ = []
