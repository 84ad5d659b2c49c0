"""
rk - reflectkit command-line interface.

Usage:
    rk scan <namespace> --base <module:Class> [--root DIR] [--instantiate]
    rk members <module:Class>
"""

__version__ = "0.3.0"
__cli_name__ = "rk"
