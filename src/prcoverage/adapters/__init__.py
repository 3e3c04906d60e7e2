"""Adapters for reading coverage tool output."""
