"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: engine, sessions, user repository
- Redis: caching with TTL
- Memory: in-process TTL cache (local runs, tests)

No lookup policy in stores - that belongs in services.
"""
