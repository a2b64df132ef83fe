"""
Callbacks called by StreamParser while parsing an OSM XML document

To create your own behaviour, subclass Callbacks and redefine any of:

    on_node(node), on_way(way), on_relation(relation)
        Called when an object is complete. Return True to store it in the
        Database given to the parser (if any), False to skip storing it.
    on_tag(obj, key, value), on_member(relation, member)
        Called before a tag or member is added. Return False to drop it.
    on_start_document(), on_end_document()
        Called once at start and end of the document.
    result()
        Whatever this returns is returned from StreamParser.parse().
"""

from typing import List, Optional, Tuple

from .models import Member, Node, OSMObject, Relation, Way


class Callbacks:
    """Default callbacks: accept everything, result is None"""

    def __init__(self):
        # Set by StreamParser to the Database objects are stored in
        self.db = None

    def on_start_document(self):
        pass

    def on_end_document(self):
        pass

    def on_node(self, node: Node) -> bool:
        return True

    def on_way(self, way: Way) -> bool:
        return True

    def on_relation(self, relation: Relation) -> bool:
        return True

    def on_tag(self, obj: OSMObject, key: str, value: str) -> bool:
        return True

    def on_member(self, relation: Relation, member: Member) -> bool:
        return True

    def result(self):
        return None


class ObjectListCallbacks(Callbacks):
    """
    Collects all objects found in the XML in one list, which parse() returns.

        parser = StreamParser(string=xml, callbacks=ObjectListCallbacks())
        objects = parser.parse()
    """

    def __init__(self):
        super().__init__()
        self.objects: List[OSMObject] = []

    def on_start_document(self):
        self.objects = []

    def on_node(self, node: Node) -> bool:
        self.objects.append(node)
        return True

    def on_way(self, way: Way) -> bool:
        self.objects.append(way)
        return True

    def on_relation(self, relation: Relation) -> bool:
        self.objects.append(relation)
        return True

    def result(self) -> List[OSMObject]:
        return self.objects


class BBoxCallbacks(Callbacks):
    """Tracks the bounding box of all nodes, result is (left, bottom, right, top)"""

    def __init__(self):
        super().__init__()
        self.bbox: Optional[List[float]] = None

    def on_start_document(self):
        self.bbox = None

    def on_node(self, node: Node) -> bool:
        if node.lon is None or node.lat is None:
            return True
        lon, lat = float(node.lon), float(node.lat)
        if self.bbox is None:
            self.bbox = [lon, lat, lon, lat]
        else:
            self.bbox[0] = min(self.bbox[0], lon)
            self.bbox[1] = min(self.bbox[1], lat)
            self.bbox[2] = max(self.bbox[2], lon)
            self.bbox[3] = max(self.bbox[3], lat)
        return True

    def result(self) -> Optional[Tuple[float, float, float, float]]:
        return tuple(self.bbox) if self.bbox is not None else None
