# deep_redact/core/__init__.py

"""Core domain models and utilities used across deep_redact.

This package provides domain types, constants, exceptions, and the
configuration loader shared by the rest of the library.
"""
