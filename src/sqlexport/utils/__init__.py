"""Utility modules for sqlexport."""
