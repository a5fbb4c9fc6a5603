"""
Test Services Package
Tests for the scheduling, dose logging, link and alert services
"""
