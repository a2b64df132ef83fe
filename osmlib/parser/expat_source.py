"""
Expat backend (xml.parsers.expat)

Entity declarations are rejected, so entity expansion attacks can't
be fed through this backend.
"""

from xml.parsers import expat

from ..errors import ParseError
from .base import ElementHandler, XMLEventSource


class ExpatEventSource(XMLEventSource):
    name = "expat"

    def run(self, handler: ElementHandler):
        parser = expat.ParserCreate()
        parser.SetParamEntityParsing(expat.XML_PARAM_ENTITY_PARSING_NEVER)

        def entity_decl(name, *args):
            raise ParseError(f"{self.describe()}: entity declarations are not allowed ({name})")

        def start_element(name, attrs):
            self.position = parser.CurrentByteIndex
            handler.start_element(name, attrs)

        def end_element(name):
            self.position = parser.CurrentByteIndex
            handler.end_element(name)

        parser.EntityDeclHandler = entity_decl
        parser.StartElementHandler = start_element
        parser.EndElementHandler = end_element

        handler.start_document()
        try:
            if self.filename is not None:
                with open(self.filename, "rb") as f:
                    parser.ParseFile(f)
            else:
                parser.Parse(self.data, True)
        except expat.ExpatError as e:
            raise ParseError(f"{self.describe()}: {e}") from e
        handler.end_document()
