"""
filters.py - Filter DTOs
Single responsibility: describe facets and carry filter inputs for queries.
"""
from dataclasses import dataclass, field
from typing import Callable, Optional

ALL = "all"


@dataclass(frozen=True)
class Facet:
    """One named filter dimension.

    ``default`` is the "unfiltered" sentinel; a facet holding it never
    reaches the outgoing query. ``initial`` is the value a fresh screen
    starts with when it differs from the sentinel. ``encode`` turns a
    non-default value into query params when the mapping is not simply
    ``{param: value}``.
    """

    name: str
    param: str
    default: str = ""
    label: str = ""
    initial: Optional[str] = None
    encode: Optional[Callable[[str], dict[str, str]]] = None

    def is_default(self, value) -> bool:
        return value is None or value == self.default

    @property
    def start_value(self) -> str:
        return self.default if self.initial is None else self.initial

    def to_params(self, value) -> dict[str, str]:
        if self.is_default(value):
            return {}
        if self.encode:
            return self.encode(value)
        return {self.param: str(value)}


@dataclass
class FilterState:
    search_text: str = ""
    facets: dict[str, str] = field(default_factory=dict)

    @classmethod
    def defaults(cls, facets: tuple[Facet, ...]) -> "FilterState":
        return cls(search_text="", facets={f.name: f.start_value for f in facets})

    def is_unfiltered(self, facets: tuple[Facet, ...]) -> bool:
        return not self.search_text and all(
            f.is_default(self.facets.get(f.name)) for f in facets
        )


def encode_active_status(value: str) -> dict[str, str]:
    """Enrollment status facet: active/inactive map onto isActive."""
    if value == "active":
        return {"isActive": "true"}
    if value == "inactive":
        return {"isActive": "false"}
    return {}


def build_query(
    state: FilterState,
    facets: tuple[Facet, ...],
    fixed: dict[str, str] | None = None,
) -> dict[str, str]:
    """
    Build outgoing query params from a filter state.

    Order: fixed params, then search, then facets in declaration order.
    Search text is passed through untrimmed; empty text is omitted.
    """
    params: dict[str, str] = dict(fixed or {})
    if state.search_text:
        params["search"] = state.search_text
    for facet in facets:
        params.update(facet.to_params(state.facets.get(facet.name, facet.default)))
    return params
