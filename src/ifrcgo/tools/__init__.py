"""IFRC GO tools: parameter schemas and the catalogue that binds them to the client."""

from .catalog import CATALOG, ToolSpec, build_registry
from .params import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    CountryIdParams,
    CountryPageParams,
    CountrySearchParams,
    DateRangeParams,
    DisasterTypeParams,
    EruTypeParams,
    LimitParams,
    NoParams,
    PageParams,
    PersonnelTypeParams,
    ToolParams,
)

__all__ = [
    "CATALOG", "ToolSpec", "build_registry",
    "ToolParams", "NoParams", "PageParams", "LimitParams",
    "CountrySearchParams", "CountryPageParams", "CountryIdParams",
    "DisasterTypeParams", "DateRangeParams", "PersonnelTypeParams", "EruTypeParams",
    "DEFAULT_LIMIT", "MAX_LIMIT",
]
