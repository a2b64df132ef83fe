"""
SAX backend (defusedxml.sax)
"""

from io import BytesIO
import xml.sax
import xml.sax.handler

from defusedxml import DefusedXmlException
import defusedxml.sax

from ..errors import ParseError
from .base import ElementHandler, XMLEventSource


class _ContentHandler(xml.sax.handler.ContentHandler):
    """Forwards SAX ContentHandler calls to an ElementHandler"""

    def __init__(self, handler: ElementHandler, source: "SaxEventSource"):
        super().__init__()
        self.handler = handler
        self.source = source
        self.locator = None

    def setDocumentLocator(self, locator):
        self.locator = locator

    def startDocument(self):
        self.handler.start_document()

    def endDocument(self):
        self.handler.end_document()

    def startElement(self, name, attrs):
        if self.locator is not None:
            self.source.line = self.locator.getLineNumber()
        self.handler.start_element(name, {key: attrs.getValue(key) for key in attrs.getNames()})

    def endElement(self, name):
        self.handler.end_element(name)


class SaxEventSource(XMLEventSource):
    name = "sax"

    def __init__(self, filename=None, string=None):
        super().__init__(filename, string)
        self.line = 0

    def run(self, handler: ElementHandler):
        parser = defusedxml.sax.make_parser()
        parser.setContentHandler(_ContentHandler(handler, self))
        try:
            if self.filename is not None:
                parser.parse(self.filename)
            else:
                parser.parse(BytesIO(self.data))
        except (xml.sax.SAXParseException, DefusedXmlException) as e:
            raise ParseError(f"{self.describe()}: {e}") from e
