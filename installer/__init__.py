"""
Commerce starter workspace installer.

This package checks prerequisites, collects configuration and drives the
external installers that set up the storefront and the generated backend.
"""

__version__ = "1.0.0"
