"""
ElementTree backend (defusedxml.ElementTree.iterparse)

Elements are cleared once their end event has been handled, memory
stays flat for large files.
"""

from io import BytesIO
import xml.etree.ElementTree as ET

from defusedxml import DefusedXmlException
import defusedxml.ElementTree as DET

from ..errors import ParseError
from .base import ElementHandler, XMLEventSource


class EtreeEventSource(XMLEventSource):
    name = "etree"

    def run(self, handler: ElementHandler):
        source = self.filename if self.filename is not None else BytesIO(self.data)
        handler.start_document()
        try:
            for event, elem in DET.iterparse(source, events=("start", "end")):
                if event == "start":
                    handler.start_element(elem.tag, dict(elem.attrib))
                else:
                    handler.end_element(elem.tag)
                    elem.clear()
        except (ET.ParseError, DefusedXmlException) as e:
            raise ParseError(f"{self.describe()}: {e}") from e
        handler.end_document()
