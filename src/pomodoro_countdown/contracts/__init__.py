"""Shared protocol constants."""
