"""Utility helpers for taskbot."""
