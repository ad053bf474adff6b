"""CLI module.

This module provides the sip-test-util command line interface.
"""
