"""
Service layer helpers that orchestrate configuration and domain logic.
"""

from .exclusion_service import ExclusionService

__all__ = ["ExclusionService"]
