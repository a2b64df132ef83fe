"""
OSM data models

Node, Way and Relation share identity and metadata fields through
OSMObject. A Relation lists its members as Member records.
"""

import math
import re
import weakref
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union
import xml.etree.ElementTree as ET

from shapely.geometry import LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry

from . import geometry as geom
from .errors import (
    FormatError,
    GeometryError,
    NoDatabaseError,
    NoGeometryError,
    NotClosedError,
    NotFoundError,
)
from .geojson import GeoJSONFeature, feature
from .ids import IdAllocator, get_allocator
from .tags import Tags

OBJECT_TYPES = ("node", "way", "relation")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_ID_RE = re.compile(r"^-?[0-9]+$")
_REF_RE = re.compile(r"^[0-9]+$")
_TIMESTAMP_RE = re.compile(
    r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(Z|[+-][0-9]{2}:[0-9]{2})$"
)
_NUMBER_RE = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?$")
_FLAG_RE = re.compile(r"^(true|yes|1)$")


# ============================================================
# Field validation
# ============================================================

def check_id(value: Union[int, str]) -> int:
    """Return value as a 64-bit signed integer id"""
    if isinstance(value, bool):
        raise TypeError("ID must be integer or string with integer")
    if isinstance(value, int):
        id_ = value
    elif isinstance(value, str):
        if not _ID_RE.fullmatch(value):
            raise ValueError(f"ID must be an integer, got {value!r}")
        id_ = int(value)
    else:
        raise TypeError("ID must be integer or string with integer")
    if not INT64_MIN <= id_ <= INT64_MAX:
        raise ValueError(f"ID {id_} is outside the 64-bit signed range")
    return id_


def check_timestamp(value: str) -> str:
    if not isinstance(value, str) or not _TIMESTAMP_RE.fullmatch(value):
        raise FormatError(
            f"Timestamp is in wrong format (must be 'yyyy-mm-ddThh:mm:ss(Z|[+-]hh:mm)'), got {value!r}"
        )
    return value


def check_coordinate(value: Union[Real, str], name: str) -> str:
    """Return lon/lat in string form, surrounding whitespace removed"""
    if isinstance(value, bool):
        raise TypeError(f"'{name}' must be number or string containing number")
    if isinstance(value, Real):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _NUMBER_RE.fullmatch(text):
            raise FormatError(f"'{name}' must be a number, got {value!r}")
    else:
        raise TypeError(f"'{name}' must be number or string containing number")
    if not math.isfinite(float(text)):
        raise FormatError(f"'{name}' must be a finite number, got {value!r}")
    return text


def check_version(value: Union[int, str]) -> int:
    if isinstance(value, bool):
        raise TypeError("version must be a positive integer")
    if isinstance(value, str):
        if not _REF_RE.fullmatch(value):
            raise FormatError(f"version must be a positive integer, got {value!r}")
        value = int(value)
    if not isinstance(value, int):
        raise TypeError("version must be a positive integer")
    if value < 1:
        raise FormatError(f"version must be a positive integer, got {value}")
    return value


def check_uid(value: Union[int, str, None]) -> Optional[int]:
    if value is None or isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _ID_RE.fullmatch(value):
        return int(value)
    raise FormatError(f"uid must be an integer, got {value!r}")


def check_type(value: str) -> str:
    if value not in OBJECT_TYPES:
        raise ValueError("type must be 'node', 'way', or 'relation'")
    return value


# ============================================================
# Append tagged union
# ============================================================

class AppendKind(Enum):
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    NODE_REF = "node reference"
    MEMBER = "member"
    SCALAR_ID = "id"


@dataclass(frozen=True)
class Append:
    """
    Operand of OSMObject.append().

    Build one with the named constructors, or let wrap() classify a plain
    value. Which kinds an object accepts depends on its type:

        Node        SEQUENCE, MAPPING
        Way         SEQUENCE, MAPPING, NODE_REF, SCALAR_ID
        Relation    SEQUENCE, MAPPING, MEMBER
    """
    kind: AppendKind
    value: Any

    @classmethod
    def sequence(cls, items: Iterable) -> "Append":
        return cls(AppendKind.SEQUENCE, tuple(items))

    @classmethod
    def tags(cls, mapping: Mapping) -> "Append":
        return cls(AppendKind.MAPPING, mapping)

    @classmethod
    def node_ref(cls, node: "Node") -> "Append":
        return cls(AppendKind.NODE_REF, node)

    @classmethod
    def member(cls, member: "Member") -> "Append":
        return cls(AppendKind.MEMBER, member)

    @classmethod
    def scalar_id(cls, value: Union[int, str]) -> "Append":
        return cls(AppendKind.SCALAR_ID, value)

    @classmethod
    def wrap(cls, value: Any) -> "Append":
        """Classify a plain value into its Append kind"""
        if isinstance(value, Append):
            return value
        if isinstance(value, Node):
            return cls.node_ref(value)
        if isinstance(value, Member):
            return cls.member(value)
        if isinstance(value, Mapping):
            return cls.tags(value)
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            return cls.scalar_id(value)
        if isinstance(value, (list, tuple)):
            return cls.sequence(value)
        raise TypeError(f"Can't append a {type(value).__name__}")


_APPEND_METHODS = {
    AppendKind.SEQUENCE: "_append_sequence",
    AppendKind.MAPPING: "append_tags",
    AppendKind.NODE_REF: "append_node_ref",
    AppendKind.SCALAR_ID: "append_node_ref",
    AppendKind.MEMBER: "append_member",
}


# ============================================================
# Objects
# ============================================================

class OSMObject:
    """
    Common part of Node, Way and Relation.

    Attributes:
        id: Unique id, negative for objects not known to the server. Read-only.
        version: Version as read from file, not updated by edits
        user: User who last edited the object
        uid: Id of the user who last edited the object
        timestamp: Time of last change, validated on assignment
        tags: Tags of this object
        db: Database this object is in, or None. Not an owning reference.
    """

    type: str = ""
    accepts: FrozenSet[AppendKind] = frozenset({AppendKind.SEQUENCE, AppendKind.MAPPING})

    def __init__(
        self,
        id: Union[int, str, None] = None,
        user: Optional[str] = None,
        timestamp: Optional[str] = None,
        uid: Union[int, str, None] = None,
        version: Union[int, str] = 1,
        tags: Optional[Mapping[str, str]] = None,
        allocator: Optional[IdAllocator] = None,
    ):
        if self.__class__ is OSMObject:
            raise TypeError("OSMObject is a virtual base class for the Node, Way, and Relation classes")
        if id is None:
            id = (allocator or get_allocator()).next_id()
        self._id = check_id(id)
        self.version = check_version(version)
        self.uid = check_uid(uid)
        self.user = user
        self._timestamp = None if timestamp is None else check_timestamp(timestamp)
        self._db = None
        self.tags = Tags()
        if tags:
            self.tags.merge(tags)

    @property
    def id(self) -> int:
        return self._id

    @id.setter
    def id(self, value):
        raise AttributeError("id can not be changed once the object was created")

    @property
    def timestamp(self) -> Optional[str]:
        return self._timestamp

    @timestamp.setter
    def timestamp(self, value: Optional[str]):
        self._timestamp = None if value is None else check_timestamp(value)

    @property
    def db(self):
        return self._db() if self._db is not None else None

    @db.setter
    def db(self, database):
        self._db = weakref.ref(database) if database is not None else None

    def attribute_list(self) -> Tuple[str, ...]:
        return ("id", "version", "uid", "user", "timestamp")

    def attributes(self) -> Dict[str, Any]:
        """All non-None attributes of this object, keyed by name"""
        attrs = {}
        for name in self.attribute_list():
            value = getattr(self, name)
            if value is not None:
                attrs[name] = value
        return attrs

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def __getitem__(self, key: str) -> Optional[str]:
        return self.tags.get(key)

    def __setitem__(self, key: str, value: str):
        self.tags[key] = value

    def tag(self, key: str) -> Optional[str]:
        """Value of tag key, None if the object doesn't have it"""
        return self.tags.get(key)

    def set_tag(self, key: str, value: str) -> str:
        self.tags[key] = value
        return value

    def tag_flag(self, key: str) -> bool:
        """True if the tag is one of 'true', 'yes' or '1' (e.g. oneway)"""
        value = self.tags.get(key)
        return value is not None and _FLAG_RE.fullmatch(str(value)) is not None

    def add_tags(self, new_tags: Mapping) -> "OSMObject":
        """Add one or more tags, return self so calls can be chained"""
        self.tags.merge(new_tags)
        return self

    def append_tags(self, new_tags: Mapping) -> "OSMObject":
        return self.add_tags(new_tags)

    def is_tagged(self) -> bool:
        return not self.tags.is_empty()

    # ------------------------------------------------------------------
    # Append
    # ------------------------------------------------------------------
    def append(self, item: Append) -> "OSMObject":
        """
        Add tags, references or members depending on the kind of item.

        Sequences are flattened recursively. Raises TypeError if this
        object type doesn't take the item's kind.
        """
        if not isinstance(item, Append):
            raise TypeError("append() takes an Append value, use << for plain values")
        if item.kind not in self.accepts:
            raise TypeError(f"Can't append a {item.kind.value} to a {self.type}")
        getattr(self, _APPEND_METHODS[item.kind])(item.value)
        return self

    def _append_sequence(self, items: Iterable):
        for item in items:
            self.append(Append.wrap(item))

    def __lshift__(self, stuff: Any) -> "OSMObject":
        return self.append(Append.wrap(stuff))

    # ------------------------------------------------------------------
    # Database lookups
    # ------------------------------------------------------------------
    def _require_db(self, action: str):
        db = self.db
        if db is None:
            raise NoDatabaseError(f"can't {action} if the {self.type} is not in a Database")
        return db

    def relations(self) -> List["Relation"]:
        """Relations in the same Database that have this object as a member"""
        db = self._require_db("find referencing relations")
        return db.relations_referring_to(self.type, self.id)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def geometry(self) -> BaseGeometry:
        raise NotImplementedError

    def to_feature(self) -> GeoJSONFeature:
        """GeoJSON Feature with this object's geometry and tags as properties"""
        return feature(self.type, self.id, self.geometry(), self.tags)

    # ------------------------------------------------------------------
    # XML
    # ------------------------------------------------------------------
    def to_xml(self, parent: Optional[ET.Element] = None) -> ET.Element:
        """
        Build the XML element for this object.

        Appended to parent if one is given.
        """
        attribs = {name: str(value) for name, value in self.attributes().items()}
        if parent is None:
            element = ET.Element(self.type, attribs)
        else:
            element = ET.SubElement(parent, self.type, attribs)
        self._children_to_xml(element)
        self.tags.to_xml(element)
        return element

    def _children_to_xml(self, element: ET.Element):
        pass

    def __repr__(self) -> str:
        return f'#<{self.__class__.__name__} id="{self.id}" user="{self.user or ""}" timestamp="{self.timestamp or ""}">'

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------
    @classmethod
    def from_api(cls, id: int, api=None) -> "OSMObject":
        """Download the object with this id from the OSM API"""
        if not cls.type:
            raise TypeError("OSMObject is a virtual base class for the Node, Way, and Relation classes")
        return _api(api).get_object(cls.type, id)

    def get_relations_from_api(self, api=None) -> List["Relation"]:
        """Relations on the server that have this object as a member"""
        return _api(api).get_relations_referring_to_object(self.type, self.id)

    def get_history_from_api(self, api=None) -> List["OSMObject"]:
        """All versions of this object known to the server"""
        return _api(api).get_history(self.type, self.id)


def _api(api):
    if api is None:
        from .api_client import OSMAPIClient
        api = OSMAPIClient()
    return api


class Node(OSMObject):
    """
    OpenStreetMap node.

        node = Node(17, "someuser", "2007-10-31T23:48:54Z", 7.4, 53.2)
    """

    type = "node"

    def __init__(
        self,
        id: Union[int, str, None] = None,
        user: Optional[str] = None,
        timestamp: Optional[str] = None,
        lon: Union[Real, str, None] = None,
        lat: Union[Real, str, None] = None,
        uid: Union[int, str, None] = None,
        version: Union[int, str] = 1,
        tags: Optional[Mapping[str, str]] = None,
        allocator: Optional[IdAllocator] = None,
    ):
        self._lon = None if lon is None else check_coordinate(lon, "lon")
        self._lat = None if lat is None else check_coordinate(lat, "lat")
        super().__init__(id, user, timestamp, uid, version, tags, allocator)

    @property
    def lon(self) -> Optional[str]:
        """Longitude in decimal degrees"""
        return self._lon

    @lon.setter
    def lon(self, value):
        self._lon = check_coordinate(value, "lon")

    @property
    def lat(self) -> Optional[str]:
        """Latitude in decimal degrees"""
        return self._lat

    @lat.setter
    def lat(self, value):
        self._lat = check_coordinate(value, "lat")

    def attribute_list(self) -> Tuple[str, ...]:
        return ("id", "version", "uid", "user", "timestamp", "lon", "lat")

    def coordinates(self) -> geom.Coordinate:
        if self.lon in (None, "") or self.lat in (None, ""):
            raise GeometryError(f"coordinates missing on node {self.id}")
        return float(self.lon), float(self.lat)

    def point(self) -> Point:
        return geom.point(*self.coordinates())

    def geometry(self) -> Point:
        return self.point()

    def ways(self) -> List["Way"]:
        """Ways in the same Database that use this node"""
        db = self._require_db("find ways using the node")
        return db.ways_using_node(self.id)

    def get_ways_using_node_from_api(self, api=None) -> List["Way"]:
        return _api(api).get_ways_using_node(self.id)

    def __repr__(self) -> str:
        return (
            f'#<Node id="{self.id}" user="{self.user or ""}" timestamp="{self.timestamp or ""}" '
            f'lon="{self.lon or ""}" lat="{self.lat or ""}">'
        )


class Way(OSMObject):
    """
    OpenStreetMap way.

    nodes holds node ids, not Node objects. Resolving them needs the way
    to be in a Database.
    """

    type = "way"
    accepts = OSMObject.accepts | {AppendKind.NODE_REF, AppendKind.SCALAR_ID}

    def __init__(
        self,
        id: Union[int, str, None] = None,
        user: Optional[str] = None,
        timestamp: Optional[str] = None,
        nodes: Iterable[Union[Node, int, str]] = (),
        uid: Union[int, str, None] = None,
        version: Union[int, str] = 1,
        tags: Optional[Mapping[str, str]] = None,
        allocator: Optional[IdAllocator] = None,
    ):
        self.nodes: List[int] = []
        for node in nodes:
            self.append_node_ref(node)
        super().__init__(id, user, timestamp, uid, version, tags, allocator)

    def append_node_ref(self, node: Union[Node, int, str]) -> "Way":
        """Add a node id (the id is taken from Node objects)"""
        if isinstance(node, Node):
            self.nodes.append(node.id)
        else:
            try:
                self.nodes.append(check_id(node))
            except (TypeError, ValueError) as e:
                raise FormatError(f"invalid node reference {node!r}") from e
        return self

    def is_closed(self) -> bool:
        """True if the way has two or more nodes and the first equals the last"""
        if len(self.nodes) < 2:
            return False
        return self.nodes[0] == self.nodes[-1]

    def node_objects(self) -> List[Node]:
        """The Node objects of this way, looked up in its Database"""
        db = self._require_db("get node objects")
        objects = []
        for id_ in self.nodes:
            node = db.get_node(id_)
            if node is None:
                raise NotFoundError(f"not in database: node {id_}")
            objects.append(node)
        return objects

    def _coordinates(self) -> List[geom.Coordinate]:
        return [node.coordinates() for node in self.node_objects()]

    def linestring(self) -> LineString:
        if len(self.nodes) < 2:
            raise GeometryError("way with less then two nodes can't be turned into a linestring")
        self._require_db("create LineString from way")
        return geom.linestring(self._coordinates())

    def polygon(self) -> Polygon:
        if len(self.nodes) < 3:
            raise GeometryError("way with less then three nodes can't be turned into a polygon")
        self._require_db("create Polygon from way")
        if not self.is_closed():
            raise NotClosedError("way is not closed so it can't be represented as Polygon")
        return geom.polygon(self._coordinates())

    def geometry(self) -> LineString:
        return self.linestring()

    def _children_to_xml(self, element: ET.Element):
        for ref in self.nodes:
            ET.SubElement(element, "nd", {"ref": str(ref)})


class Relation(OSMObject):
    """OpenStreetMap relation"""

    type = "relation"
    accepts = OSMObject.accepts | {AppendKind.MEMBER}

    def __init__(
        self,
        id: Union[int, str, None] = None,
        user: Optional[str] = None,
        timestamp: Optional[str] = None,
        members: Iterable["Member"] = (),
        uid: Union[int, str, None] = None,
        version: Union[int, str] = 1,
        tags: Optional[Mapping[str, str]] = None,
        allocator: Optional[IdAllocator] = None,
    ):
        self.members: List[Member] = []
        for member in members:
            self.append_member(member)
        super().__init__(id, user, timestamp, uid, version, tags, allocator)

    def append_member(self, member: "Member") -> "Relation":
        if not isinstance(member, Member):
            raise TypeError("Relation members must be Member instances")
        self.members.append(member)
        return self

    def member(self, type_: str, ref: int) -> Optional["Member"]:
        """First member with the given type and id, None if there is none"""
        for member in self.members:
            if member.type == type_ and member.ref == ref:
                return member
        return None

    def member_objects(self) -> List[OSMObject]:
        """Objects referenced by the members, looked up in the Database"""
        db = self._require_db("get member objects")
        objects = []
        for member in self.members:
            obj = db.get(member.type, member.ref)
            if obj is None:
                raise NotFoundError(f"not in database: {member.type} {member.ref}")
            objects.append(obj)
        return objects

    def geometry(self) -> BaseGeometry:
        raise NoGeometryError("Relations don't have a geometry")

    def polygon(self) -> Polygon:
        """
        Polygon made up of all the ways in this relation.

        Works only for relations tagged type=multipolygon or type=polygon.
        The first way is the outer ring, the others are holes.
        """
        self._require_db("create Polygon from relation")
        if self.tag("type") not in ("multipolygon", "polygon"):
            raise NoGeometryError("can't create Polygon from relation if it does not represent a polygon")

        rings = []
        for way in self.member_objects():
            if not isinstance(way, Way):
                raise GeometryError(f"member {way.type} {way.id} is not a way so it can't be represented as Polygon")
            if not way.is_closed():
                raise NotClosedError(f"way {way.id} is not closed so it can't be represented as Polygon")
            if len(way.nodes) < 3:
                raise GeometryError(f"way {way.id} with less then three nodes can't be turned into a polygon")
            rings.append(way._coordinates())
        if not rings:
            raise GeometryError("relation has no members to build a polygon from")
        return geom.polygon(rings[0], rings[1:])

    def _children_to_xml(self, element: ET.Element):
        for member in self.members:
            member.to_xml(element)


class Member:
    """
    A member of a Relation.

    Args:
        type: 'node', 'way' or 'relation'
        ref: Id of the referenced object
        role: Freeform string, can be empty
    """

    def __init__(self, type: str, ref: Union[int, str], role: Optional[str] = ""):
        self.type = check_type(type)
        if isinstance(ref, bool) or not isinstance(ref, (int, str)) or not _REF_RE.fullmatch(str(ref)) or int(ref) < 1:
            raise ValueError(f"ref must be a positive integer, got {ref!r}")
        self.ref = int(ref)
        self.role = role or ""

    def to_xml(self, parent: Optional[ET.Element] = None) -> ET.Element:
        attribs = {"type": self.type, "ref": str(self.ref), "role": self.role}
        if parent is None:
            return ET.Element("member", attribs)
        return ET.SubElement(parent, "member", attribs)

    def __eq__(self, other):
        if not isinstance(other, Member):
            return NotImplemented
        return (self.type, self.ref, self.role) == (other.type, other.ref, other.role)

    def __hash__(self):
        return hash((self.type, self.ref, self.role))

    def __repr__(self) -> str:
        return f"Member(type={self.type!r}, ref={self.ref}, role={self.role!r})"
