"""Prompt templates used on the live path."""
