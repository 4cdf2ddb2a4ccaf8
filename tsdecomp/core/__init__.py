"""Configuration, logging and command-line entry point."""
