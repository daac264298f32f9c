"""Core navigation, record and resolution logic."""
