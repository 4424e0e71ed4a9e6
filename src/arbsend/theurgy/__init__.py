"""
Theurgy - Command implementations for arbsend.

Each module backs one or more top-level CLI commands:
- probe:    chain, balance, token (read-only queries)
- gas:      fees (fee quote for a basic transfer)
- transfer: send (quote, guard, broadcast, confirm)
"""
