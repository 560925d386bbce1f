"""Shared utilities for the cart client."""
