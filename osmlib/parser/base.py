"""
XML event source interface

A backend turns an XML document into four kinds of events and feeds them
to an ElementHandler. StreamParser is written against this interface only.
"""

from typing import Dict, Optional, Union


class ElementHandler:
    """Receiver of XML events"""

    def start_document(self):
        raise NotImplementedError

    def start_element(self, name: str, attrs: Dict[str, str]):
        raise NotImplementedError

    def end_element(self, name: str):
        raise NotImplementedError

    def end_document(self):
        raise NotImplementedError


class XMLEventSource:
    """
    Base class for the backend adapters.

    Exactly one of filename or string must be given. String input may be
    str or bytes, str is encoded as UTF-8.

    Attributes:
        name: Registry name of the backend
        position: Byte offset of the last event, where the backend reports it
    """

    name = ""

    def __init__(self, filename: Optional[str] = None, string: Union[str, bytes, None] = None):
        if (filename is None) == (string is None):
            raise ValueError("need either filename or string argument")
        self.filename = filename
        if isinstance(string, str):
            string = string.encode("utf-8")
        self.data: Optional[bytes] = string
        self.position = 0

    def run(self, handler: ElementHandler):
        """Parse the whole input, calling handler for every event"""
        raise NotImplementedError

    def describe(self) -> str:
        if self.filename is not None:
            return self.filename
        return f"<string, {len(self.data)} bytes>"
