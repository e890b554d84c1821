"""Shared utilities for gituim."""
