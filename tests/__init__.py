"""
Tests package - test suite for the webapp admission webhook.

Contains:
- unit/: Unit tests for individual components
- fixtures/: Sample Deployment resources
"""
