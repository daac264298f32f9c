"""Core type definitions."""

from typing import NewType

# Public route for a record (e.g., "/docs/intro", "/developers/guides/setup")
# Distinct from normalized source paths to catch type mismatches
URLPath = NewType("URLPath", str)
