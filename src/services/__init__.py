"""Business logic services used by handlers.

Handlers import services lazily so a cold start does not open database
connections or build AWS clients for routes it never serves.
"""

# Do NOT import services here - use lazy loading in handlers instead
