"""
Tests for WardShift.
"""
