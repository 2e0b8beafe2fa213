"""Shared helpers for archiver."""
