"""
Tests for Node, Way, Relation and Member
"""

import pytest

from osmlib.errors import FormatError
from osmlib.models import Append, AppendKind, Member, Node, OSMObject, Relation, Way


# ============================================================
# Identity and metadata
# ============================================================

def test_base_class_can_not_be_created():
    with pytest.raises(TypeError):
        OSMObject(1)


def test_id_from_int_and_string():
    assert Node(17).id == 17
    assert Node("17").id == 17
    assert Node("-5").id == -5


@pytest.mark.parametrize("bad_id", ["abc", "1.5", "", "12a", str(2 ** 63), "12\n"])
def test_malformed_id_rejected(bad_id):
    with pytest.raises(ValueError):
        Node(bad_id)


@pytest.mark.parametrize("bad_id", [1.0, True, [1]])
def test_id_of_wrong_type_rejected(bad_id):
    with pytest.raises(TypeError):
        Node(bad_id)


def test_placeholder_ids_are_negative_and_unique():
    ids = {Node().id for _ in range(20)}
    assert len(ids) == 20
    assert all(id_ < 0 for id_ in ids)


def test_id_is_immutable():
    node = Node(1)
    with pytest.raises(AttributeError):
        node.id = 2
    assert node.id == 1


def test_defaults():
    way = Way(5)
    assert way.version == 1
    assert way.user is None
    assert way.uid is None
    assert way.timestamp is None
    assert way.db is None
    assert way.tags.is_empty()


@pytest.mark.parametrize("timestamp", [
    "2007-10-31T23:48:54Z",
    "2007-10-31T23:48:54+01:00",
    "2007-10-31T23:48:54-05:30",
])
def test_valid_timestamps(timestamp):
    assert Node(1, timestamp=timestamp).timestamp == timestamp


@pytest.mark.parametrize("timestamp", [
    "2007-10-31 23:48:54Z",
    "2007-10-31T23:48:54",
    "2007-10-31T23:48:54+0100",
    "yesterday",
    "2008-01-01T10:00:00Z\n",
])
def test_malformed_timestamp_rejected(timestamp):
    with pytest.raises(FormatError):
        Node(1, timestamp=timestamp)


def test_timestamp_checked_on_assignment():
    node = Node(1)
    node.timestamp = "2008-01-01T00:00:00Z"
    with pytest.raises(FormatError):
        node.timestamp = "2008-01-01"
    assert node.timestamp == "2008-01-01T00:00:00Z"


def test_version_and_uid_from_strings():
    node = Node(1, version="3", uid="42")
    assert node.version == 3
    assert node.uid == 42
    with pytest.raises(ValueError):
        Node(1, version=0)
    with pytest.raises(FormatError):
        Node(1, version="x")


@pytest.mark.parametrize("version", [0, "0", "x", "2\n", -1])
def test_bad_version_is_format_error(version):
    with pytest.raises(FormatError):
        Node(1, version=version)


# ============================================================
# Node coordinates
# ============================================================

def test_coordinates_stored_as_strings():
    node = Node(1, lon=7.4, lat=53)
    assert node.lon == "7.4"
    assert node.lat == "53"
    node.lon = "-0.5"
    assert node.lon == "-0.5"


@pytest.mark.parametrize("value", ["east", "1,5", "", "nan"])
def test_non_numeric_coordinate_rejected(value):
    with pytest.raises(FormatError):
        Node(1, lon=value, lat="1.0")
    node = Node(1)
    with pytest.raises(FormatError):
        node.lat = value


def test_coordinate_of_wrong_type_rejected():
    with pytest.raises(TypeError):
        Node(1, lon=[1.0], lat=2.0)


def test_coordinate_whitespace_is_stripped():
    node = Node(1, lon=" 1.0 ", lat="\t2\n")
    assert (node.lon, node.lat) == ("1.0", "2")
    assert node.to_xml().get("lon") == "1.0"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "1e999"])
def test_non_finite_coordinate_rejected(value):
    with pytest.raises(FormatError):
        Node(1, lon=value, lat=0)
    node = Node(1)
    with pytest.raises(FormatError):
        node.lat = value
    assert node.lat is None


def test_attributes():
    node = Node(17, "someuser", "2007-10-31T23:48:54Z", 7.4, 53.2)
    assert node.attributes() == {
        "id": 17,
        "version": 1,
        "user": "someuser",
        "timestamp": "2007-10-31T23:48:54Z",
        "lon": "7.4",
        "lat": "53.2",
    }
    assert list(Way(3).attributes()) == ["id", "version"]


# ============================================================
# Tags
# ============================================================

def test_tag_accessors():
    node = Node(1)
    node.add_tags({"highway": "residential", "name": "Main Street"})
    assert node.tag("highway") == "residential"
    assert node["name"] == "Main Street"
    node.set_tag("highway", "unclassified")
    node["ref"] = "B 5"
    assert node.tags == {"highway": "unclassified", "name": "Main Street", "ref": "B 5"}
    assert node.tag("missing") is None


@pytest.mark.parametrize("value,expected", [
    ("yes", True), ("true", True), ("1", True),
    ("no", False), ("yes please", False), ("Yes", False), ("yes\n", False),
])
def test_tag_flag(value, expected):
    way = Way(1, tags={"oneway": value})
    assert way.tag_flag("oneway") is expected


def test_tag_flag_missing():
    assert Way(1).tag_flag("oneway") is False


def test_is_tagged():
    node = Node(1)
    assert not node.is_tagged()
    assert node.add_tags({"a": "b"}) is node
    assert node.is_tagged()


# ============================================================
# Append dispatch
# ============================================================

def test_wrap_classifies_values():
    assert Append.wrap([1, 2]).kind is AppendKind.SEQUENCE
    assert Append.wrap({"a": "b"}).kind is AppendKind.MAPPING
    assert Append.wrap(Node(1)).kind is AppendKind.NODE_REF
    assert Append.wrap(Member("way", 1)).kind is AppendKind.MEMBER
    assert Append.wrap(7).kind is AppendKind.SCALAR_ID
    assert Append.wrap("7").kind is AppendKind.SCALAR_ID
    with pytest.raises(TypeError):
        Append.wrap(1.5)


def test_node_append_tags_and_sequences():
    node = Node(1)
    result = node << {"a": "1"} << [{"b": "2"}, [{"c": "3"}]]
    assert result is node
    assert node.tags == {"a": "1", "b": "2", "c": "3"}


def test_node_rejects_references():
    node = Node(1)
    with pytest.raises(TypeError):
        node << 5
    with pytest.raises(TypeError):
        node.append(Append.member(Member("node", 2)))


def test_append_requires_append_value():
    with pytest.raises(TypeError):
        Node(1).append({"a": "b"})


def test_way_append():
    way = Way(1)
    way << Node(5) << 6 << "7" << [Node(8), 5] << {"highway": "path"}
    assert way.nodes == [5, 6, 7, 8, 5]
    assert way.tags == {"highway": "path"}


def test_way_append_named_operations():
    way = Way(1)
    way.append(Append.node_ref(Node(3))).append(Append.scalar_id(4))
    way.append_node_ref("5").append_tags({"a": "b"})
    assert way.nodes == [3, 4, 5]


def test_way_rejects_members_and_bad_refs():
    way = Way(1)
    with pytest.raises(TypeError):
        way << Member("node", 1)
    with pytest.raises(FormatError):
        way << "abc"


def test_way_constructor_copies_node_ids():
    node = Node(9)
    way = Way(1, nodes=[node, 10, "11"])
    assert way.nodes == [9, 10, 11]


def test_relation_append():
    relation = Relation(1)
    relation << Member("way", 2, "outer") << [Member("node", 3), {"type": "multipolygon"}]
    assert relation.members == [Member("way", 2, "outer"), Member("node", 3, "")]
    assert relation.tags == {"type": "multipolygon"}
    with pytest.raises(TypeError):
        relation << 4
    with pytest.raises(TypeError):
        relation << Node(4)


# ============================================================
# Way
# ============================================================

@pytest.mark.parametrize("nodes,closed", [
    ([1, 2, 3, 1], True),
    ([1, 2, 3], False),
    ([], False),
    ([5], False),
    ([5, 5], True),
])
def test_is_closed(nodes, closed):
    assert Way(1, nodes=nodes).is_closed() is closed


# ============================================================
# Member
# ============================================================

def test_member():
    member = Member("way", "12", "outer")
    assert (member.type, member.ref, member.role) == ("way", 12, "outer")
    assert Member("node", 1).role == ""
    assert Member("node", 1, None).role == ""


@pytest.mark.parametrize("type_", ["area", "Node", "", None])
def test_member_type_rejected(type_):
    with pytest.raises(ValueError):
        Member(type_, 1)


@pytest.mark.parametrize("ref", ["abc", -1, 0, "1.0", 1.0, True])
def test_member_ref_rejected(ref):
    with pytest.raises(ValueError):
        Member("node", ref)


def test_relation_member_lookup():
    relation = Relation(1, members=[Member("node", 1, "a"), Member("way", 1, "b")])
    assert relation.member("way", 1).role == "b"
    assert relation.member("relation", 1) is None


# ============================================================
# XML
# ============================================================

def test_node_to_xml():
    node = Node(17, "someuser", "2007-10-31T23:48:54Z", 7.4, 53.2, tags={"amenity": "pub"})
    element = node.to_xml()
    assert element.tag == "node"
    assert element.attrib == {
        "id": "17", "version": "1", "user": "someuser",
        "timestamp": "2007-10-31T23:48:54Z", "lon": "7.4", "lat": "53.2",
    }
    assert element.find("tag").attrib == {"k": "amenity", "v": "pub"}


def test_way_and_relation_to_xml():
    way = Way(2, nodes=[1, 3])
    assert [nd.get("ref") for nd in way.to_xml().findall("nd")] == ["1", "3"]

    relation = Relation(3, members=[Member("way", 2, "outer")], tags={"type": "multipolygon"})
    element = relation.to_xml()
    assert element.find("member").attrib == {"type": "way", "ref": "2", "role": "outer"}
    assert element.find("tag").attrib == {"k": "type", "v": "multipolygon"}


def test_repr():
    assert repr(Node(1, "u", None, 1.5, 2)) == '#<Node id="1" user="u" timestamp="" lon="1.5" lat="2">'
    assert repr(Way(2)).startswith('#<Way id="2"')
