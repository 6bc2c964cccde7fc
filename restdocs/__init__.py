"""Keeps the REST reference pages in sync with the per-version API schemas."""
