"""Presentation layer - HTTP surface."""
