"""
In-memory OSM database

Holds nodes, ways and relations in three independent id indexes. Objects
keep a weak back-reference to the database they are in.
"""

from typing import Dict, Iterator, List, Optional, Union
import xml.etree.ElementTree as ET

from loguru import logger

from .config import get_config
from .geojson import GeoJSONFeatureCollection
from .models import Node, OSMObject, Relation, Way, check_id, check_type


class Database:
    """
    An OSM database. Contents are unordered.

    Adding an object with the same id as an object already in the database
    replaces the old one, which is detached (its db becomes None).

        db = Database()
        db << Node(1, lon=7.4, lat=53.2) << Way(2, nodes=[1])

    Attributes:
        version: OSM API version written into the XML dump
        nodes: Dict of node id -> Node
        ways: Dict of way id -> Way
        relations: Dict of relation id -> Relation
    """

    def __init__(self, version: Optional[str] = None):
        self.version = version or get_config().api_version
        self.nodes: Dict[int, Node] = {}
        self.ways: Dict[int, Way] = {}
        self.relations: Dict[int, Relation] = {}

    def clear(self):
        """
        Delete all nodes, ways and relations from the database.

        Every object is detached first so objects that outlive the
        database don't point at it.
        """
        for index in (self.nodes, self.ways, self.relations):
            for obj in index.values():
                if obj.db is self:
                    obj.db = None
        self.nodes = {}
        self.ways = {}
        self.relations = {}

    def _insert(self, index: Dict[int, OSMObject], obj: OSMObject) -> OSMObject:
        old = index.get(obj.id)
        if old is not None and old is not obj:
            logger.debug(f"Replacing {obj.type} {obj.id} in database")
            if old.db is self:
                old.db = None
        index[obj.id] = obj
        obj.db = self
        return obj

    def add_node(self, node: Node) -> Node:
        return self._insert(self.nodes, node)

    def add_way(self, way: Way) -> Way:
        return self._insert(self.ways, way)

    def add_relation(self, relation: Relation) -> Relation:
        return self._insert(self.relations, relation)

    def add(self, obj: OSMObject) -> "Database":
        """Add a Node, Way or Relation, return self so calls can be chained"""
        if isinstance(obj, Node):
            self.add_node(obj)
        elif isinstance(obj, Way):
            self.add_way(obj)
        elif isinstance(obj, Relation):
            self.add_relation(obj)
        else:
            raise TypeError("Can only add objects of classes Node, Way, or Relation")
        return self

    def __lshift__(self, obj: OSMObject) -> "Database":
        return self.add(obj)

    def get_node(self, id_: Union[int, str]) -> Optional[Node]:
        return self.nodes.get(check_id(id_))

    def get_way(self, id_: Union[int, str]) -> Optional[Way]:
        return self.ways.get(check_id(id_))

    def get_relation(self, id_: Union[int, str]) -> Optional[Relation]:
        return self.relations.get(check_id(id_))

    def get(self, type_: str, id_: Union[int, str]) -> Optional[OSMObject]:
        """Get an object by type name ('node', 'way' or 'relation') and id"""
        index = {"node": self.nodes, "way": self.ways, "relation": self.relations}[check_type(type_)]
        return index.get(check_id(id_))

    # ------------------------------------------------------------------
    # Back-references
    # ------------------------------------------------------------------
    def ways_using_node(self, node_id: Union[int, str]) -> List[Way]:
        node_id = check_id(node_id)
        return [way for way in self.ways.values() if node_id in way.nodes]

    def relations_referring_to(self, type_: str, id_: Union[int, str]) -> List[Relation]:
        type_ = check_type(type_)
        id_ = check_id(id_)
        return [
            relation for relation in self.relations.values()
            if relation.member(type_, id_) is not None
        ]

    def __len__(self) -> int:
        return len(self.nodes) + len(self.ways) + len(self.relations)

    def __iter__(self) -> Iterator[OSMObject]:
        """Nodes first, then ways, then relations"""
        yield from self.nodes.values()
        yield from self.ways.values()
        yield from self.relations.values()

    def __repr__(self) -> str:
        return f"<Database version={self.version} nodes={len(self.nodes)} ways={len(self.ways)} relations={len(self.relations)}>"

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def to_xml(self, generator: Optional[str] = None) -> ET.Element:
        """
        Dump database to an <osm> element.

        Args:
            generator: Value of the generator attribute (default from config)

        Returns:
            ET.Element with all nodes, then ways, then relations
        """
        root = ET.Element("osm", {
            "version": str(self.version),
            "generator": generator or get_config().generator,
        })
        for obj in self:
            obj.to_xml(root)
        return root

    def to_string(self, generator: Optional[str] = None) -> str:
        root = self.to_xml(generator)
        ET.indent(root, space="  ")
        body = ET.tostring(root, encoding="unicode")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"

    def save(self, filename: str, generator: Optional[str] = None):
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.to_string(generator))
        logger.info(f"Saved {len(self)} objects to {filename}")

    def to_feature_collection(self, generator: Optional[str] = None) -> GeoJSONFeatureCollection:
        """
        GeoJSON for tagged nodes and all ways.

        Untagged nodes are only way vertices, relations have no geometry.
        Unresolvable ways raise NotFoundError.
        """
        features = [node.to_feature() for node in self.nodes.values() if node.is_tagged()]
        features.extend(way.to_feature() for way in self.ways.values())
        return GeoJSONFeatureCollection(
            features=features,
            generator=generator or get_config().generator,
        )
