"""Graph package - relationship graph engine for family members."""

from kinship.graph.models import EdgePair, RelatedMember, RelationshipEdge, RelationshipType
from kinship.graph.member_store import MemberStore
from kinship.graph.type_registry import RelationshipTypeRegistry
from kinship.graph.family.graph import FamilyGraph

__all__ = [
    "EdgePair",
    "RelatedMember",
    "RelationshipEdge",
    "RelationshipType",
    "MemberStore",
    "RelationshipTypeRegistry",
    "FamilyGraph",
]
