"""Shared helpers: file deletion, imaging, logging setup."""
