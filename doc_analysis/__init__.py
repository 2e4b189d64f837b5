"""Receipt analysis long-running operation client.

Tracks server-side receipt analysis jobs: polls the service until the
job reaches a terminal state, then exposes the recognized receipts or
the structured failure reported by the service.
"""

__version__ = "0.1.0"
