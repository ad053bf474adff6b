"""Unit tests for sip_test_util modules, one test module per source module."""
