"""
spockscan.commands - CLI command implementations
"""

__all__ = [
    "command_cmd",
    "discover",
    "results",
]
