"""Shared utilities for posture-audit."""
