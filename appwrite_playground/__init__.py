"""Appwrite playground: a button-driven harness over the Appwrite client API."""

__version__ = "0.1.0"
