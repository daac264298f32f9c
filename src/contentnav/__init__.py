"""Contentnav - navigation trees and route resolution for documentation content."""

__version__ = "0.1.0"
