"""Lookup services.

Services hold the lookup policy and are called by routes.
Stores and caches are passed in explicitly, never reached through globals.
"""
