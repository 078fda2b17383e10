"""
Service layer for depstags.

Services orchestrate domain objects and infrastructure:
- TagsService: freshness checks and tags generation across roots
"""

from .tags_service import TagsService, TagsUpdateOptions, RootPlan

__all__ = [
    'TagsService',
    'TagsUpdateOptions',
    'RootPlan',
]
