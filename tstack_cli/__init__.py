"""
TStack CLI

Scaffolds API, admin UI, storefront and status projects from starter
templates, and tracks them (alone or grouped into workspaces) in a local
metadata store.
"""

__version__ = "0.1.0"
