"""
Test Tools Package
Tests for the tools module (time helpers, push senders)
"""
