"""Core primitives shared by every layer: tags, ids, errors, settings."""
