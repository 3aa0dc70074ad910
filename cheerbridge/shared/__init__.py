"""Shared models and helpers used by every cheerbridge service."""
