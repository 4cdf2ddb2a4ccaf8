"""Decomposition, comparison and summary routines."""
