"""Test suite for the archiver project.

This package contains all tests for the archiver project, organized by module:
- cli/: Tests for command line interface functionality
- core/: Tests for the archive engine (entries, secure joins, readers, writers, config, downloads)
- utils/: Tests for utility functions
"""
