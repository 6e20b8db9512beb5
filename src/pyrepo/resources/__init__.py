"""Packaged resource files (framework default configuration)."""
