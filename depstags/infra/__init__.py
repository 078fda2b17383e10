"""
Infrastructure layer for depstags.

Thin wrappers around external programs:
- CtagsClient: the tags indexing engine
- CargoClient: the cargo dependency resolver
"""

from .ctags_client import CtagsClient
from .cargo_client import CargoClient, graph_from_cargo_metadata

__all__ = [
    'CtagsClient',
    'CargoClient',
    'graph_from_cargo_metadata',
]
