"""Offline driver used by the CLI demo and the test suite."""
