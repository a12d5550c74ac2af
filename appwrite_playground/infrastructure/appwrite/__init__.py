"""Appwrite REST, service and realtime clients."""
