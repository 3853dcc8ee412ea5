"""
Contracts (data models).

This folder defines the request/response shapes for external integrations.
Examples:
- canonical quotation request sent to SSW cotarSite
- collection request sent to SSW coletar
- decoded reply read back from either operation

Why this exists:
- Ensures consistent data structures across mock and real clients
- Prevents "guessing" payload formats in multiple places
- The freight engine hands these frozen objects between its stages instead of ad-hoc dicts

Both mock and real HTTP clients should use these contracts.
"""
