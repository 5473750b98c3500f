"""Shared utilities: constants, configuration, input resolution and JSON helpers."""
