"""Concrete adapters for external programs and cloud APIs."""
