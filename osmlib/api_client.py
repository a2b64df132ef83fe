"""
OSM API client

Handles communication with the versioned OSM REST API:
- Argument checking before any request is made
- Mapping of HTTP status codes to APIError subclasses
- Feeding response bodies through StreamParser
"""

from numbers import Real
from typing import Iterable, List, Optional

import requests
from loguru import logger

from .callbacks import ObjectListCallbacks
from .config import get_config
from .database import Database
from .errors import (
    APIBadRequest,
    APIError,
    APIGone,
    APINotFound,
    APIServerError,
    APITooManyObjects,
    APIUnauthorized,
)
from .models import OBJECT_TYPES, Node, OSMObject, Relation, Way
from .parser import StreamParser

STATUS_ERRORS = {
    400: APIBadRequest,
    401: APIUnauthorized,
    404: APINotFound,
    410: APIGone,
    500: APIServerError,
}


def check_response_codes(response: requests.Response):
    """Raise the APIError subclass for the response status, return on 200"""
    if response.status_code == 200:
        return
    error = STATUS_ERRORS.get(response.status_code, APIError)
    body = response.text.strip()
    logger.error(f"OSM API failed: HTTP {response.status_code} for {response.url}")
    raise error(
        f"HTTP {response.status_code} {response.reason or ''}".strip() + (f": {body}" if body else ""),
        status=response.status_code,
        body=body,
    )


def _check_type(type_: str) -> str:
    if type_ not in OBJECT_TYPES:
        raise ValueError("type needs to be one of 'node', 'way', and 'relation'")
    return type_


def _check_id(id_: int) -> int:
    if isinstance(id_, bool) or not isinstance(id_, int) or id_ <= 0:
        raise TypeError("id needs to be a positive integer")
    return id_


def _check_coordinate(value: float, name: str, limit: int) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f'"{name}" value needs to be a number between -{limit} and {limit}')
    if not -limit <= value <= limit:
        raise ValueError(f'"{name}" value needs to be a number between -{limit} and {limit}, got {value}')
    return float(value)


class OSMAPIClient:
    """
    Client for the OSM API.

        api = OSMAPIClient()
        node = api.get_node(3437)

    Args:
        base_uri: API base URI ending in '/', default from config
        session: requests.Session to send requests with
        backend: XML backend for parsing responses, default from config
    """

    def __init__(
        self,
        base_uri: Optional[str] = None,
        session: Optional[requests.Session] = None,
        backend: Optional[str] = None,
    ):
        self.config = get_config()
        self.base_uri = base_uri or self.config.api.base_uri
        self.timeout = self.config.api.timeout
        self.session = session or requests.Session()
        self.backend = backend

    def get(self, path: str) -> bytes:
        """
        GET base_uri + path and return the response body.

        Raises:
            APIError: (or a subclass) for any status other than 200
        """
        url = self.base_uri + path
        logger.info(f"GET {url}")
        response = self.session.get(
            url,
            headers={"User-Agent": self.config.api.user_agent},
            timeout=self.timeout,
        )
        check_response_codes(response)
        return response.content

    def _parse_list(self, body: bytes) -> List[OSMObject]:
        parser = StreamParser(string=body, callbacks=ObjectListCallbacks(), backend=self.backend)
        return parser.parse()

    def _parse_database(self, body: bytes) -> Database:
        db = Database()
        StreamParser(string=body, db=db, backend=self.backend).parse()
        return db

    def _api_call(self, id_: int, path: str) -> List[OSMObject]:
        _check_id(id_)
        return self._parse_list(self.get(path))

    # ------------------------------------------------------------------
    # Single objects
    # ------------------------------------------------------------------
    def get_object(self, type_: str, id_: int) -> Optional[OSMObject]:
        """Get a node, way or relation with the given id"""
        _check_type(type_)
        objects = self._api_call(id_, f"{type_}/{id_}")
        if len(objects) > 1:
            raise APITooManyObjects(f"expected one {type_}, got {len(objects)} objects")
        return objects[0] if objects else None

    def get_node(self, id_: int) -> Optional[Node]:
        return self.get_object("node", id_)

    def get_way(self, id_: int) -> Optional[Way]:
        return self.get_object("way", id_)

    def get_relation(self, id_: int) -> Optional[Relation]:
        return self.get_object("relation", id_)

    def get_objects(self, type_: str, ids: Iterable[int]) -> List[OSMObject]:
        """Get several objects of one type in a single request"""
        _check_type(type_)
        ids = [_check_id(id_) for id_ in ids]
        if not ids:
            return []
        return self._parse_list(self.get(f"{type_}s?{type_}s={','.join(str(id_) for id_ in ids)}"))

    # ------------------------------------------------------------------
    # References and history
    # ------------------------------------------------------------------
    def get_ways_using_node(self, id_: int) -> List[Way]:
        return self._api_call(id_, f"node/{id_}/ways")

    def get_relations_referring_to_object(self, type_: str, id_: int) -> List[Relation]:
        _check_type(type_)
        return self._api_call(id_, f"{type_}/{id_}/relations")

    def get_history(self, type_: str, id_: int) -> List[OSMObject]:
        """All versions of an object, oldest first"""
        _check_type(type_)
        return self._api_call(id_, f"{type_}/{id_}/history")

    def get_full(self, type_: str, id_: int) -> Database:
        """A way or relation together with everything it references"""
        if type_ not in ("way", "relation"):
            raise ValueError("type needs to be one of 'way' and 'relation'")
        _check_id(id_)
        return self._parse_database(self.get(f"{type_}/{id_}/full"))

    # ------------------------------------------------------------------
    # Regions
    # ------------------------------------------------------------------
    def get_bbox(self, left: float, bottom: float, right: float, top: float) -> Database:
        """
        Get all objects in the bounding box

        Args:
            left: Western longitude, -180..180
            bottom: Southern latitude, -90..90
            right: Eastern longitude, -180..180
            top: Northern latitude, -90..90

        Returns:
            Database with the objects
        """
        left = _check_coordinate(left, "left", 180)
        bottom = _check_coordinate(bottom, "bottom", 90)
        right = _check_coordinate(right, "right", 180)
        top = _check_coordinate(top, "top", 90)
        return self._parse_database(self.get(f"map?bbox={left},{bottom},{right},{top}"))
