"""Command line interface for finddupfiles."""
