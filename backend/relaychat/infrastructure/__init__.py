"""
Infrastructure Layer - implementations of domain and application ports.

- persistence/: repositories (in-memory, Prisma)
- cache/: Redis read-through cache for message history
- security/: JWT token service, password hashing
- presence/: presence registry for live connections
"""
