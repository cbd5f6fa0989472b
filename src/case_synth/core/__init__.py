"""Application configuration and startup checks."""
