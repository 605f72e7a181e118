"""Release automation for npm monorepos: dist-tag promotion and release naming."""

__version__ = "0.1.0"
