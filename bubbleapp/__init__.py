"""Functional components, hooks, layout, routing and viewports for terminal user interfaces."""

__version__ = "0.1.0"