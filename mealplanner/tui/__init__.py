"""Textual key-setup interface."""
