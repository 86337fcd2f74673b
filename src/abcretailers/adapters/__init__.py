"""
Adapters layer for ABC Retailers.

Azure Storage implementations of the application's storage port.
"""
