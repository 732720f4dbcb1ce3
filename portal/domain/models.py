"""
models.py - Domain models
Single responsibility: typed containers for resource definitions and screen state.
"""
from dataclasses import dataclass, field
from typing import Callable, Optional

from portal.domain.filters import Facet, FilterState

MODAL_CREATE = "create"
MODAL_EDIT = "edit"
MODAL_DELETE = "delete"

_VERBS = {
    MODAL_CREATE: ("create", "created"),
    "update": ("update", "updated"),
    MODAL_DELETE: ("delete", "deleted"),
}


@dataclass(frozen=True)
class CompositeUpdate:
    """Update spanning the account record and a role-profile record.

    Account fields go to ``PATCH {item}/{id}``; profile fields to
    ``PATCH {item}/{id}/{profile_path}``. Empty profile values are dropped.
    """

    profile_path: str
    account_fields: tuple[str, ...] = ("fullName", "email")
    profile_fields: tuple[str, ...] = ()

    def split(self, payload: dict) -> tuple[dict, dict]:
        account = {k: payload[k] for k in self.account_fields if k in payload}
        profile = {k: payload[k] for k in self.profile_fields if payload.get(k)}
        return account, profile


@dataclass(frozen=True)
class ResourceSpec:
    key: str
    label: str
    plural: str
    list_path: str
    item_path: Optional[str] = None
    create_path: Optional[str] = None
    facets: tuple[Facet, ...] = ()
    fixed_params: dict = field(default_factory=dict)
    transform: Optional[Callable[[dict], dict]] = None
    # Reorders the transformed list (e.g. pinned posts first)
    order: Optional[Callable[[list], list]] = None
    composite: Optional[CompositeUpdate] = None
    can_create: bool = True
    can_update: bool = True
    can_delete: bool = True
    searchable: bool = True
    # Roles allowed to view the list; empty means any signed-in user
    roles: tuple[str, ...] = ()
    messages: dict = field(default_factory=dict)

    @property
    def items_path(self) -> str:
        return self.item_path or self.list_path

    @property
    def new_path(self) -> str:
        return self.create_path or self.list_path

    def path_for(self, record_id) -> str:
        return f"{self.items_path}/{record_id}"

    def message(self, action: str, ok: bool) -> str:
        """Notification text, e.g. "Course created successfully!" / "Failed to create course"."""
        key = f"{action}_{'success' if ok else 'failure'}"
        if key in self.messages:
            return self.messages[key]
        verb, past = _VERBS[action]
        if ok:
            return f"{self.label[:1].upper()}{self.label[1:]} {past} successfully!"
        return f"Failed to {verb} {self.label}"

    @property
    def load_failure(self) -> str:
        return self.messages.get("load_failure", f"Failed to load {self.plural}")


@dataclass
class Selection:
    """The single record targeted by the open edit or delete modal."""

    mode: str
    record: dict

    @property
    def id(self):
        return self.record.get("id")


@dataclass
class ScreenState:
    filter_state: FilterState
    items: list = field(default_factory=list)
    selection: Selection | None = None
    modal: str | None = None
    loading: bool = False
    submitting: bool = False


@dataclass
class ChatMessage:
    sender: str
    text: str
    timestamp: str | None = None
    id: Optional[int] = None

    def __getitem__(self, key):
        return getattr(self, key)
