"""sentrytop - live terminal dashboard for a network monitoring backend."""

__version__ = "0.1.0"
