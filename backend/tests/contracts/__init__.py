"""
Contract tests for repository interfaces.

Contract tests verify that all implementations of a repository interface
follow the same contract and behavior. These tests can be reused for
any implementation (Redis, GCS, S3, SQL, etc.).
"""
