"""CLI module for demiurge-studio."""
