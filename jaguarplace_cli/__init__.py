"""
Command-line interface for the JaguarPlace SDK.
"""
from .main import cli

__all__ = ["cli"]
