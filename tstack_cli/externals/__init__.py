"""Narrow wrappers around external tools and services."""
