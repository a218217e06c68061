"""
Infrastructure Layer - Technical implementations of domain ports.

This layer contains:
- persistence/: Prisma repositories for the Gateway tables
- assistants/: OpenAI Assistants provisioner
- auth/: JWT session providers
"""
