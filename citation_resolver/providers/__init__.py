"""Upstream metadata providers and their adapters."""
