"""Shared data models for graph operations."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple, Optional


class RelatedMember(NamedTuple):
    """A neighbour of a member, with the edge type that reaches it."""
    member_id: int
    type_slug: str


@dataclass
class RelationshipType:
    """Catalog entry for a kind of relationship."""
    slug: str
    label: str
    category: str  # immediate, extended, non_family
    inverse_slug: Optional[str] = None
    is_system: bool = False
    sort_order: int = 0
    tenant_id: Optional[int] = None  # None = global default
    id: Optional[int] = None

    @property
    def is_symmetric(self) -> bool:
        return self.inverse_slug == self.slug

    @property
    def is_global(self) -> bool:
        return self.tenant_id is None


@dataclass
class RelationshipEdge:
    """Directed edge: to_member is the <type_slug> of from_member."""
    from_member_id: int
    to_member_id: int
    type_slug: str
    tenant_id: int
    id: Optional[int] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def related(self) -> RelatedMember:
        return RelatedMember(self.to_member_id, self.type_slug)


@dataclass
class EdgePair:
    """Result of a link: the forward edge and its inverse."""
    edge: RelationshipEdge
    inverse_edge: RelationshipEdge
    created: bool = True
