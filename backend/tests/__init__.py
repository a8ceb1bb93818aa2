"""
Tests package for the fileshare backend.

This package contains test suites organized by type:
- unit/: Fast tests over in-memory collaborators
- integration/: Tests against a real Redis server
- contracts/: Contract tests for repository interfaces
- property/: Hypothesis property-based tests
"""
