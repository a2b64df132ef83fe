"""
Tag collection attached to nodes, ways and relations
"""

from typing import Mapping, Optional
import xml.etree.ElementTree as ET


class Tags(dict):
    """
    Ordered key/value string mapping.

    Keys are unique, merging an existing key overwrites its value.
    """

    def merge(self, other: Mapping) -> "Tags":
        """Add all entries of other, overwriting existing keys"""
        for key, value in other.items():
            self[str(key)] = value
        return self

    def is_empty(self) -> bool:
        return len(self) == 0

    def to_xml(self, parent: ET.Element) -> ET.Element:
        """Append <tag k="..." v="..."/> children to parent"""
        for key, value in self.items():
            ET.SubElement(parent, "tag", {"k": str(key), "v": "" if value is None else str(value)})
        return parent

    def __str__(self) -> str:
        """Comma separated key=value pairs sorted by key"""
        return ", ".join(f"{key}={value}" for key, value in sorted(self.items()))

    def __repr__(self) -> str:
        return f"Tags({dict.__repr__(self)})"

    @classmethod
    def from_string(cls, text: Optional[str]) -> "Tags":
        """
        Parse the str() rendering back into a Tags object.

        Pairs are split on ", " and each pair on its first "=", so keys
        can't contain "=" and values can't contain ", ".
        """
        tags = cls()
        if not text:
            return tags
        for pair in text.split(", "):
            key, sep, value = pair.partition("=")
            if not sep:
                raise ValueError(f"Tag pair without '=': {pair!r}")
            tags[key] = value
        return tags
