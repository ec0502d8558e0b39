"""Core configuration, error and time primitives."""
