"""Cause storage, chain introspection and rendering internals."""
