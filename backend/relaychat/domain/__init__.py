"""
DOMAIN LAYER - Direct messaging core

This layer contains:
- Entities: Business objects with identity (User, Conversation, Message)
- Value Objects: Immutable types (UserId, ConversationId, MessageId, Participant)
- Ports: Interfaces that infrastructure implements (repositories, tokens, hashing)
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Prisma, Pydantic, etc.)
2. NO I/O operations (no database, no HTTP, no file system)
3. Only depends on Python stdlib
"""
