"""Sigil - Signing key handling."""
