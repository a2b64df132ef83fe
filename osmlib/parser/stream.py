"""
Streaming OSM XML parser

Turns element events from any XMLEventSource into Node, Way and Relation
objects. While a node/way/relation element is open, the object being
built is held in `context`.
"""

from enum import Enum
from typing import Dict, Optional, Union

from loguru import logger

from ..callbacks import Callbacks
from ..config import get_config
from ..errors import ParseError, UnknownParserError, VersionError
from ..models import Member, Node, OSMObject, Relation, Way
from .base import ElementHandler, XMLEventSource
from .etree_source import EtreeEventSource
from .expat_source import ExpatEventSource
from .sax_source import SaxEventSource

BACKENDS = {
    SaxEventSource.name: SaxEventSource,
    ExpatEventSource.name: ExpatEventSource,
    EtreeEventSource.name: EtreeEventSource,
}


def get_backend(name: str):
    """Return the XMLEventSource class registered under name"""
    try:
        return BACKENDS[name]
    except KeyError:
        raise UnknownParserError(
            f"Unknown XML parser {name!r}, use one of {', '.join(sorted(BACKENDS))}"
        ) from None


class ParserState(Enum):
    IDLE = "idle"
    DOCUMENT_OPEN = "document open"
    DOCUMENT_CLOSED = "document closed"


class StreamParser(ElementHandler):
    """
    Parse an OSM XML document, calling the callbacks for every object.

        parser = StreamParser(filename="file.osm", db=Database())
        parser.parse()

    Args:
        filename: Name of the XML file
        string: XML document as str or bytes
        db: Database accepted objects are stored in
        callbacks: Callbacks instance, a plain Callbacks if not given
        backend: XML backend name ('sax', 'expat', 'etree'), default from config

    Only one of filename and string can be used. A parser parses once.
    """

    def __init__(
        self,
        filename: Optional[str] = None,
        string: Union[str, bytes, None] = None,
        db=None,
        callbacks: Optional[Callbacks] = None,
        backend: Optional[str] = None,
    ):
        self.config = get_config()
        self.backend = backend or self.config.parser.backend
        self.source: XMLEventSource = get_backend(self.backend)(filename=filename, string=string)
        self.db = db
        self.callbacks = callbacks if callbacks is not None else Callbacks()
        self.callbacks.db = db
        self.state = ParserState.IDLE
        self.context: Optional[OSMObject] = None
        self.version: Optional[str] = None
        self.counts = {"node": 0, "way": 0, "relation": 0}
        self._depth = 0
        self._skip_depth = 0

        self._start_handlers = {
            "node": self._start_node,
            "way": self._start_way,
            "relation": self._start_relation,
            "tag": self._tag,
            "nd": self._nd,
            "member": self._member,
        }

    @property
    def position(self) -> int:
        """Byte position within the input (only tracked by the expat backend)"""
        return self.source.position

    def parse(self):
        """Run the parser, return the result of callbacks.result()"""
        if self.state is not ParserState.IDLE:
            raise ParseError("StreamParser can only parse once, create a new one")
        logger.debug(f"Parsing {self.source.describe()} with {self.backend} backend")
        self.source.run(self)
        if self.state is not ParserState.DOCUMENT_CLOSED:
            raise ParseError("document ended unexpectedly")
        logger.debug(
            f"Parsed {self.counts['node']} nodes, {self.counts['way']} ways, "
            f"{self.counts['relation']} relations"
        )
        return self.callbacks.result()

    # ------------------------------------------------------------------
    # ElementHandler
    # ------------------------------------------------------------------
    def start_document(self):
        if self.state is not ParserState.IDLE:
            raise ParseError(f"start of document while {self.state.value}")
        self.state = ParserState.DOCUMENT_OPEN
        self.callbacks.on_start_document()

    def end_document(self):
        if self.state is not ParserState.DOCUMENT_OPEN:
            raise ParseError(f"end of document while {self.state.value}")
        if self.context is not None:
            raise ParseError(f"document ended inside {self.context.type} {self.context.id}")
        if self.version is None:
            raise ParseError("document has no <osm> root element")
        self.state = ParserState.DOCUMENT_CLOSED
        self.callbacks.on_end_document()

    def start_element(self, name: str, attrs: Dict[str, str]):
        if self.state is not ParserState.DOCUMENT_OPEN:
            raise ParseError(f"<{name}> while {self.state.value}")
        self._depth += 1
        if self._skip_depth:
            self._skip_depth += 1
            return
        if self._depth == 1:
            self._start_osm(name, attrs)
            return
        handler = self._start_handlers.get(name)
        if handler is None:
            # unknown element, its whole subtree is ignored
            self._skip_depth = 1
            return
        handler(attrs)

    def end_element(self, name: str):
        self._depth -= 1
        if self._skip_depth:
            self._skip_depth -= 1
            return
        if name in ("node", "way", "relation") and self._depth >= 1:
            self._end_object(name)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------
    def _start_osm(self, name: str, attrs: Dict[str, str]):
        if name != "osm":
            raise ParseError(f"root element must be <osm>, got <{name}>")
        version = attrs.get("version")
        supported = self.config.parser.supported_versions
        if version not in supported:
            raise VersionError(
                f"StreamParser only understands OSM file version {' and '.join(supported)}, got {version!r}"
            )
        self.version = version

    def _open(self, obj: OSMObject):
        if self.context is not None:
            raise ParseError(f"<{obj.type}> inside {self.context.type} {self.context.id}")
        self.context = obj

    @staticmethod
    def _common(attrs: Dict[str, str]) -> dict:
        return {
            "id": attrs.get("id"),
            "user": attrs.get("user"),
            "timestamp": attrs.get("timestamp"),
            "uid": attrs.get("uid"),
            "version": attrs.get("version", 1),
        }

    def _start_node(self, attrs: Dict[str, str]):
        self._open(Node(lon=attrs.get("lon"), lat=attrs.get("lat"), **self._common(attrs)))

    def _start_way(self, attrs: Dict[str, str]):
        self._open(Way(**self._common(attrs)))

    def _start_relation(self, attrs: Dict[str, str]):
        self._open(Relation(**self._common(attrs)))

    def _end_object(self, name: str):
        context = self.context
        if context is None or context.type != name:
            raise ParseError(f"</{name}> without matching <{name}>")
        accepted = getattr(self.callbacks, f"on_{name}")(context)
        if accepted and self.db is not None:
            self.db.add(context)
        self.counts[name] += 1
        self.context = None

    def _required(self, element: str, attrs: Dict[str, str], key: str) -> str:
        value = attrs.get(key)
        if value is None:
            raise ParseError(f"<{element}> without '{key}' attribute")
        return value

    def _tag(self, attrs: Dict[str, str]):
        if self.context is None:
            raise ParseError("<tag> outside of node, way or relation")
        key = self._required("tag", attrs, "k")
        value = self._required("tag", attrs, "v")
        if self.callbacks.on_tag(self.context, key, value):
            self.context.add_tags({key: value})

    def _nd(self, attrs: Dict[str, str]):
        if not isinstance(self.context, Way):
            raise ParseError("<nd> outside of way")
        self.context.append_node_ref(self._required("nd", attrs, "ref"))

    def _member(self, attrs: Dict[str, str]):
        if not isinstance(self.context, Relation):
            raise ParseError("<member> outside of relation")
        member = Member(attrs.get("type"), attrs.get("ref"), attrs.get("role", ""))
        if self.callbacks.on_member(self.context, member):
            self.context.append_member(member)
