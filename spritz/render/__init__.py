"""Renderers that write raw, text, XML, JSON and HTML response bodies."""

__all__ = ["base", "json", "html"]