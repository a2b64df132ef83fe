"""
Configuration settings for osmlib
"""

from dataclasses import dataclass, field
from typing import Tuple
import os


@dataclass
class APIConfig:
    """OSM API endpoint and request settings"""
    # Base URI of the versioned REST API, paths are appended to it
    base_uri: str = field(default_factory=lambda: os.environ.get(
        "OSMLIB_API_URI", "https://api.openstreetmap.org/api/0.6/"
    ))

    # Request settings
    timeout: int = 30

    # User agent for API requests
    user_agent: str = "osmlib/0.3"


@dataclass
class ParserConfig:
    """Streaming parser configuration"""
    # XML event source: "sax", "expat" or "etree"
    backend: str = field(default_factory=lambda: os.environ.get("OSMLIB_XML_PARSER", "sax"))

    # Accepted values of the <osm version="..."> attribute
    supported_versions: Tuple[str, ...] = ("0.5", "0.6")


@dataclass
class OSMLibConfig:
    """Library configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)

    # Written into <osm version="..."> when dumping a database
    api_version: str = "0.6"

    # Written into <osm generator="..."> when dumping a database
    generator: str = "osmlib"


# Global config instance
config = OSMLibConfig()


def get_config() -> OSMLibConfig:
    """Get global configuration"""
    return config


def validate_config(config: OSMLibConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    # Imported here, the parser package reads the config at import time
    from .parser import BACKENDS

    errors = []

    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.base_uri:
            errors.append("api.base_uri is required but not set")
        elif not config.api.base_uri.endswith("/"):
            errors.append(f"api.base_uri must end with '/', got {config.api.base_uri!r}")
        if config.api.timeout is None or config.api.timeout <= 0:
            errors.append(f"api.timeout must be positive, got {config.api.timeout}")

    if config.parser is None:
        errors.append("parser configuration is required but not set")
    else:
        if config.parser.backend not in BACKENDS:
            errors.append(
                f"parser.backend must be one of {', '.join(sorted(BACKENDS))}, "
                f"got {config.parser.backend!r}"
            )
        if not config.parser.supported_versions:
            errors.append("parser.supported_versions must not be empty")

    if config.api_version not in (config.parser.supported_versions if config.parser else ()):
        errors.append(f"api_version {config.api_version!r} is not a supported version")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
