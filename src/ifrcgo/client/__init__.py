"""IFRC GO API client: canonical requests, cached fetches, ERU type resolution."""

from .api import DEFAULT_LIMIT, ERU_TYPES, STATISTICS_LIMIT, GoApiClient
from .eru import ALIASES, EruTypeMapping, parse_catalogue
from .request import RequestDescriptor

__all__ = [
    "GoApiClient", "RequestDescriptor", "EruTypeMapping",
    "ALIASES", "parse_catalogue", "DEFAULT_LIMIT", "STATISTICS_LIMIT", "ERU_TYPES",
]
