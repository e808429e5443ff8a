"""Coursecast - scheduled assignment publishing and scheduled email dispatch."""

__version__ = "0.1.0"
