"""Endpoint catalog models.

``EndpointSetEntry`` validates one object of the endpoint-list service's
JSON payload. ``EndpointGroup`` is the normalized, immutable form the rest
of the check works with.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class EndpointSetEntry(BaseModel):
    """One endpoint set as published by the endpoint-list service.

    Only the fields the check uses are declared; ips, ports and the other
    published attributes are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    service_area: str = Field(alias="serviceArea")
    urls: list[str] | None = None


EndpointSetList = TypeAdapter(list[EndpointSetEntry])


@dataclass(frozen=True)
class EndpointGroup:
    """A functional category of required hostnames."""

    id: int
    category: str
    urls: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.urls:
            raise ValueError(f"Endpoint group {self.id} has no URLs")
