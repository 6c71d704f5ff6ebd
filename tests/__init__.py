"""
Weywallet Test Suite

This package contains the tests for the Weywallet API:

- test_identifiers.py: Credential and handle generation
- test_auth.py: Registration, login and the user directory
- test_transactions.py: Transaction CRUD and ownership-scoped deletes
- test_analytics.py: Balance, categories, weekly buckets, averages, monthly summary
- test_chat.py: Contacts, direct messages, read tracking and global chat
- test_errors.py: JSON error responses

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_analytics.py

Run with verbose output:
    pytest tests/ -v
"""
