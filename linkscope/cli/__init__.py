"""
linkscope Command Line Interface.

Tools for inspecting, encoding and decoding interface addresses and for
listing the addresses configured on local interfaces.
"""

from .main import cli, main

__all__ = ["main", "cli"]
