"""Shared helpers for adocmedia CLI commands."""
