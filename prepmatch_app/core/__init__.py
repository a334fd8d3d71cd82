"""Core infrastructure layer: bootstrap, logging, errors, signals, registry."""
