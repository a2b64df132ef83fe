"""
Exception types raised by osmlib

Invalid caller input uses the builtin TypeError / ValueError. Everything
library specific derives from OSMError.
"""

from typing import Optional


class OSMError(Exception):
    """Base class for osmlib errors"""


# ============================================================
# Format errors (raised while constructing or parsing)
# ============================================================

class FormatError(OSMError, ValueError):
    """A value does not have the format the OSM data model requires"""


class VersionError(FormatError):
    """The document declares an OSM version the parser does not understand"""


class ParseError(FormatError):
    """The XML document is malformed or elements are nested unexpectedly"""


class UnknownParserError(OSMError, ValueError):
    """An unknown XML backend was requested"""


# ============================================================
# Database consistency errors (raised lazily on resolution)
# ============================================================

class DatabaseConsistencyError(OSMError):
    """Cross-reference resolution failed"""


class NoDatabaseError(DatabaseConsistencyError):
    """The object is not in a Database but database access is needed"""


class NotFoundError(DatabaseConsistencyError):
    """A referenced object is not in the Database"""


# ============================================================
# Geometry errors
# ============================================================

class GeometryError(OSMError):
    """The object can't be turned into a proper geometry"""


class NotClosedError(GeometryError):
    """A way that has to be closed (first node equals last node) isn't"""


class NoGeometryError(GeometryError):
    """The object is not associated with a geometry"""


# ============================================================
# API errors
# ============================================================

class APIError(OSMError):
    """Unspecified OSM API error"""

    def __init__(self, message: str = "", status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message or self.__class__.__doc__)
        self.status = status
        self.body = body


class APIBadRequest(APIError):
    """The API returned HTTP 400 (Bad Request)"""


class APIUnauthorized(APIError):
    """The API operation wasn't authorized (HTTP 401)"""


class APINotFound(APIError):
    """The object was not found (HTTP 404), it doesn't exist and never has"""


class APIGone(APIError):
    """The object used to exist but was deleted (HTTP 410)"""


class APIServerError(APIError):
    """Unspecified API server error (HTTP 500)"""


class APITooManyObjects(APIError):
    """The API returned more than one object where it should only have returned one"""
