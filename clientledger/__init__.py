"""
ClientLedger - client, service and debt tracking for small businesses.
"""
