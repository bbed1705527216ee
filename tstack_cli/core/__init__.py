"""Lifecycle engine, workspace orchestration and naming."""
