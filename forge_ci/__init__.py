"""forge-ci — run the Forge CLI non-interactively inside a CI pipeline."""

__version__ = "0.1.0"
