"""
grepurl package initializer.
Defines package version and exposes CLI.
"""
__version__ = "1.1.0"

from .cli import cli  # экспорт для pytest
