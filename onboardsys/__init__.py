"""Core package for the onboarding data migration toolkit.

Moves client-local legacy records into the remote persistence API and
records a version marker once the move has completed.
"""

__all__: list[str] = []
