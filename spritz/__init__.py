"""Building blocks for HTTP web applications: response writers, renderers, errors, log lines and paths."""

__version__ = "0.1.0"