"""Lemon Learn source package."""
