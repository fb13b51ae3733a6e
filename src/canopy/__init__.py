"""Procedural plant generation and stage-based growth."""
