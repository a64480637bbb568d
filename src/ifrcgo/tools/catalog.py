"""The IFRC GO tool catalogue.

Each tool is one row: name, description, params model, and the client call
it maps to. build_registry() binds every row to a GoApiClient and returns a
sealed registry; nothing else in the package knows about individual tools.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

from ifrcgo.client import GoApiClient
from ifrcgo.foundation.core import Tool, ToolMetadata
from ifrcgo.foundation.registry import ToolRegistry

from .params import (
    CountryIdParams,
    CountryPageParams,
    CountrySearchParams,
    DateRangeParams,
    DisasterTypeParams,
    EruTypeParams,
    NoParams,
    PageParams,
    PersonnelTypeParams,
    ToolParams,
)

ClientCall = Callable[[GoApiClient, Any], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Catalogue row: how one tool maps onto the client."""
    
    name: str
    description: str
    params: type[ToolParams]
    call: ClientCall
    category: str = "general"
    requires_auth: bool = False
    
    def bind(self, client: GoApiClient) -> Tool[Any]:
        metadata = ToolMetadata(
            name=self.name,
            description=self.description,
            category=self.category,
            requires_auth=self.requires_auth,
        )
        return Tool(metadata=metadata, params_schema=self.params, handler=partial(self.call, client))


CATALOG: tuple[ToolSpec, ...] = (
    # ── DREF ──────────────────────────────────────────────────────────
    ToolSpec(
        "get_completed_drefs",
        "Retrieve completed DREF (Disaster Relief Emergency Fund) operations",
        PageParams, lambda c, p: c.get_completed_drefs(p.limit, p.offset), "dref",
    ),
    ToolSpec(
        "get_ongoing_drefs",
        "Get currently active DREF operations",
        PageParams, lambda c, p: c.get_ongoing_drefs(p.limit, p.offset), "dref",
    ),
    ToolSpec(
        "search_drefs_by_country",
        "Find DREF operations by country ISO code",
        CountrySearchParams, lambda c, p: c.search_drefs_by_country(p.country_iso, p.limit), "dref",
    ),
    ToolSpec(
        "search_drefs_by_disaster_type",
        "Search DREF operations by disaster type (flood, earthquake, cyclone, etc.)",
        DisasterTypeParams, lambda c, p: c.search_drefs_by_disaster_type(p.disaster_type, p.limit), "dref",
    ),
    ToolSpec(
        "get_dref_statistics",
        "Get summary statistics about DREF operations: counts and requested/funded totals",
        NoParams, lambda c, p: c.get_dref_statistics(), "dref",
    ),
    # ── Appeals and emergencies ───────────────────────────────────────
    ToolSpec(
        "get_appeals",
        "Access humanitarian appeals for funding",
        PageParams, lambda c, p: c.get_appeals(p.limit, p.offset), "emergency",
    ),
    ToolSpec(
        "get_emergencies",
        "Query emergency events and disasters",
        PageParams, lambda c, p: c.get_emergencies(p.limit, p.offset), "emergency",
    ),
    ToolSpec(
        "search_operations_by_date_range",
        "Find emergency events whose disaster start date falls within a date range",
        DateRangeParams,
        lambda c, p: c.search_operations_by_date_range(p.start_date, p.end_date, p.limit, p.offset),
        "emergency",
    ),
    ToolSpec(
        "get_field_reports",
        "List field reports submitted by National Societies and IFRC delegations",
        PageParams, lambda c, p: c.get_field_reports(p.limit, p.offset), "emergency",
    ),
    ToolSpec(
        "get_surge_deployments",
        "List surge alerts for rapid response personnel deployments",
        PageParams, lambda c, p: c.get_surge_deployments(p.limit, p.offset), "surge",
    ),
    ToolSpec(
        "get_personnel_by_type",
        "List deployed personnel filtered by deployment type (FACT, HEOP, RDRT, IFRC, ERU, RR)",
        PersonnelTypeParams,
        lambda c, p: c.get_personnel_by_type(p.personnel_type, p.limit, p.offset),
        "surge", True,
    ),
    # ── Reference data ────────────────────────────────────────────────
    ToolSpec(
        "get_countries",
        "List countries known to IFRC GO with their ids and ISO codes",
        PageParams, lambda c, p: c.get_countries(p.limit, p.offset), "reference",
    ),
    ToolSpec(
        "get_country_profile",
        "Get the full IFRC GO profile of a single country by numeric id",
        CountryIdParams, lambda c, p: c.get_country_profile(p.country_id), "reference",
    ),
    ToolSpec(
        "get_regions",
        "List IFRC regions (Africa, Americas, Asia Pacific, Europe, MENA)",
        PageParams, lambda c, p: c.get_regions(p.limit, p.offset), "reference",
    ),
    ToolSpec(
        "get_disaster_types",
        "List the disaster type catalogue used to classify emergencies",
        PageParams, lambda c, p: c.get_disaster_types(p.limit, p.offset), "reference",
    ),
    # ── Country scoped ────────────────────────────────────────────────
    ToolSpec(
        "get_country_emergencies",
        "List emergency events affecting a country by ISO code",
        CountryPageParams, lambda c, p: c.get_country_emergencies(p.country_iso, p.limit, p.offset), "country",
    ),
    ToolSpec(
        "get_country_operations",
        "List appeals and operations for a country by ISO code",
        CountryPageParams, lambda c, p: c.get_country_operations(p.country_iso, p.limit, p.offset), "country",
    ),
    ToolSpec(
        "get_country_field_reports",
        "List field reports for a country by ISO code",
        CountryPageParams, lambda c, p: c.get_country_field_reports(p.country_iso, p.limit, p.offset), "country",
    ),
    ToolSpec(
        "get_country_situation_reports",
        "List situation reports for emergencies in a country by ISO code",
        CountryPageParams,
        lambda c, p: c.get_country_situation_reports(p.country_iso, p.limit, p.offset),
        "country",
    ),
    ToolSpec(
        "get_country_personnel",
        "List personnel deployed to a country by ISO code",
        CountryPageParams, lambda c, p: c.get_country_personnel(p.country_iso, p.limit, p.offset),
        "country", True,
    ),
    ToolSpec(
        "get_country_projects",
        "List Red Cross Red Crescent projects in a country by ISO code",
        CountryPageParams, lambda c, p: c.get_country_projects(p.country_iso, p.limit, p.offset), "country",
    ),
    ToolSpec(
        "get_country_flash_updates",
        "List flash updates for a country by ISO code",
        CountryPageParams, lambda c, p: c.get_country_flash_updates(p.country_iso, p.limit, p.offset),
        "country", True,
    ),
    # ── Emergency Response Units ──────────────────────────────────────
    ToolSpec(
        "get_erus",
        "List Emergency Response Units (ERUs) and their deployment status",
        PageParams, lambda c, p: c.get_erus(p.limit, p.offset), "eru",
    ),
    ToolSpec(
        "get_erus_by_country",
        "List Emergency Response Units deployed to a country by ISO code",
        CountryPageParams, lambda c, p: c.get_erus_by_country(p.country_iso, p.limit, p.offset), "eru",
    ),
    ToolSpec(
        "get_erus_by_type",
        "List Emergency Response Units of one type, by numeric id or label such as 'wash' or 'logistics'",
        EruTypeParams, lambda c, p: c.get_erus_by_type(p.eru_type, p.limit, p.offset), "eru",
    ),
    ToolSpec(
        "get_eru_readiness",
        "Get ERU readiness reports from National Societies",
        PageParams, lambda c, p: c.get_eru_readiness(p.limit, p.offset), "eru", True,
    ),
    ToolSpec(
        "get_eru_owners",
        "List National Societies that own Emergency Response Units",
        PageParams, lambda c, p: c.get_eru_owners(p.limit, p.offset), "eru",
    ),
    ToolSpec(
        "get_eru_types",
        "List ERU types with their ids and the short aliases accepted by get_erus_by_type",
        NoParams, lambda c, p: c.get_eru_types(), "eru",
    ),
)


def build_registry(client: GoApiClient, specs: tuple[ToolSpec, ...] = CATALOG) -> ToolRegistry:
    """Bind every catalogue row to client and return the sealed registry."""
    registry = ToolRegistry()
    registry.register_all(*(spec.bind(client) for spec in specs))
    registry.seal()
    return registry
