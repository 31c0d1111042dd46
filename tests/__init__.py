"""Test suite for the suitekit package.

This package contains unit and integration tests validating suite
registration, hook collection, execution order, error normalization,
assertion helpers and the command-line runner.
"""
