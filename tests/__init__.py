"""Test package for code-kb

Fakes and shared fixtures live in conftest.py.
"""
