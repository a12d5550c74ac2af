"""Playground runtime wiring."""
