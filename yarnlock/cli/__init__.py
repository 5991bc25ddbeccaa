"""Command line interface for yarnlock."""
