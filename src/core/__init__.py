"""Core domain package for notifi-client.

Core contains authentication, reconciliation, and alert lifecycle logic
without any transport or storage-specific code, keeping the business logic
portable.
"""
