"""Core services: configuration, exceptions, process environment."""
