"""Command-line interface module for archiver."""
from .cli import main
from . import commands

__all__ = ['main', 'commands']
