"""Explore With Me event service."""
