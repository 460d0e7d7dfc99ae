"""Command line interface for adocmedia."""
