"""Shared utilities for the Excel helper package."""
