"""CLI commands for seedkit."""
