"""Shared utilities for sudo-rule-cache."""
