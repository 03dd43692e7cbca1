"""
Persistence Layer - storage implementations for domain ports.

- memory/: single-process storage (default)
- prisma/: PostgreSQL via Prisma
"""
