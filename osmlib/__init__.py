"""
osmlib: OpenStreetMap data in memory

Modules:
- Models: Node, Way, Relation, Member and their tags
- Database: In-memory store resolving references between objects
- Callbacks / Parser: Streaming XML ingestion with pluggable backends
- API client: OSM REST API access
- GeoJSON: Export of object geometries
"""

from .api_client import OSMAPIClient
from .callbacks import BBoxCallbacks, Callbacks, ObjectListCallbacks
from .config import get_config
from .database import Database
from .ids import IdAllocator
from .models import Append, AppendKind, Member, Node, OSMObject, Relation, Way
from .parser import StreamParser
from .tags import Tags

__version__ = "0.3.0"

__all__ = [
    "Append",
    "AppendKind",
    "BBoxCallbacks",
    "Callbacks",
    "Database",
    "IdAllocator",
    "Member",
    "Node",
    "OSMAPIClient",
    "OSMObject",
    "ObjectListCallbacks",
    "Relation",
    "StreamParser",
    "Tags",
    "Way",
    "get_config",
]
