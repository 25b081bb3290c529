"""Core utilities - configuration, logging, errors, hooks and store context."""
