"""Core domain: configuration, sequencing, models and channels."""
