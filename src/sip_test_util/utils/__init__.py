"""Utilities module.

This module provides the exception hierarchy and error categorization.
"""
