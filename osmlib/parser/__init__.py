"""
Streaming OSM XML parsing

- Base: XML event source interface
- Backends: sax, expat and etree adapters
- Stream: backend independent parser state machine
"""

from .base import ElementHandler, XMLEventSource
from .stream import BACKENDS, ParserState, StreamParser, get_backend

__all__ = [
    "BACKENDS",
    "ElementHandler",
    "ParserState",
    "StreamParser",
    "XMLEventSource",
    "get_backend",
]
