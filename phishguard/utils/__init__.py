"""Shared helpers for PhishGuard."""
