"""Main FamilyGraph facade combining all operations."""

from typing import Iterable, Optional

from kinship.config import settings
from kinship.graph.errors import MemberNotFound
from kinship.graph.family.edges import RelationshipEdgeStore
from kinship.graph.family.queries import DerivedRelationQueries
from kinship.graph.family.resolver import NameLinkageResolver
from kinship.graph.member_store import MemberStore
from kinship.graph.models import EdgePair, RelatedMember, RelationshipType
from kinship.graph.storage import write_transaction
from kinship.graph.type_registry import RelationshipTypeRegistry
from kinship.logging import get_logger
from kinship.models import Member

logger = get_logger(__name__)


class FamilyGraph:
    """
    Main interface for family graph operations.

    Combines member, type, edge, query and name-resolution operations over
    one SQLite database.

    Usage:
        graph = FamilyGraph("data/kinship.db")
        alice = graph.add_member(Member(tenant_id=1, first_name="Alice"))
        bob = graph.add_member(Member(tenant_id=1, first_name="Bob", gender="male"))
        graph.link(alice.id, bob.id, "father")   # Bob is Alice's father
        graph.father(alice.id)                    # {RelatedMember(bob.id, "father")}
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or settings.database.graph_db_path

        # Compose operations
        self.members = MemberStore(self.db_path)
        self.registry = RelationshipTypeRegistry(self.db_path)
        self.edges = RelationshipEdgeStore(self.registry, self.members, self.db_path)
        self.queries = DerivedRelationQueries(self.edges, self.members, self.registry)
        self.resolver = NameLinkageResolver(self.members)

        if settings.graph.verify_classification:
            for problem in self.registry.check_classification():
                logger.warning("classification_problem", problem=problem)

    # ─────────────────────────────────────────
    # Member operations
    # ─────────────────────────────────────────

    def add_member(self, member: Member) -> Member:
        member_id = self.members.add_member(member)
        return member.model_copy(update={"id": member_id})

    def get_member(self, member_id: int) -> Optional[Member]:
        return self.members.get_member(member_id)

    def list_members(self, tenant_id: int) -> list[Member]:
        return self.members.list_for_tenant(tenant_id)

    def add_member_with_relationships(
        self, member: Member, relationships: Iterable[tuple[int, str]]
    ) -> tuple[Member, list[EdgePair]]:
        """
        Create a member and link it to existing members.

        Args:
            member: New member
            relationships: (related_member_id, type_slug) pairs, each read as
                "related member is the <type_slug> of the new member"

        If any link fails the new member and its edges are removed again
        and the error is re-raised.
        """
        created = self.add_member(member)
        pairs = []
        try:
            for related_id, type_slug in relationships:
                pairs.append(self.edges.link(created.id, related_id, type_slug))
        except Exception:
            self.remove_member(created.id)
            raise
        return created, pairs

    def remove_member(self, member_id: int) -> bool:
        """Detach all edge pairs of a member and delete it in one transaction."""
        with write_transaction(self.db_path, self.edges.timeout) as conn:
            if self.members.tenant_of(member_id, conn) is None:
                raise MemberNotFound(member_id)
            self.edges.remove_member_edges(member_id, conn)
            return self.members.delete_member(member_id, conn)

    # ─────────────────────────────────────────
    # Relationship operations (delegated)
    # ─────────────────────────────────────────

    def link(self, member_a: int, member_b: int, type_slug: str) -> EdgePair:
        return self.edges.link(member_a, member_b, type_slug)

    def unlink(self, member_a: int, member_b: int, type_slug: str) -> int:
        return self.edges.unlink(member_a, member_b, type_slug)

    def link_by_name(self, tenant_id: int, name_a: str, name_b: str, type_slug: str) -> EdgePair:
        """Resolve both names within the tenant, then link them."""
        member_a = self.resolver.resolve(tenant_id, name_a)
        member_b = self.resolver.resolve(tenant_id, name_b)
        return self.edges.link(member_a.id, member_b.id, type_slug)

    def relationships_for_tenant(self, tenant_id: int) -> list[dict]:
        """Each relationship pair of a tenant once, with names and a description."""
        pairs = self.edges.pairs_for_tenant(tenant_id)
        people = self.members.get_many(
            member_id for edge in pairs for member_id in (edge.from_member_id, edge.to_member_id)
        )
        listing = []
        for edge in pairs:
            member = people.get(edge.from_member_id)
            related = people.get(edge.to_member_id)
            if member is None or related is None:
                continue
            listing.append({
                "id": edge.id,
                "member_id": edge.from_member_id,
                "member_name": member.display_name,
                "related_member_id": edge.to_member_id,
                "related_member_name": related.display_name,
                "relationship_type": edge.type_slug,
                "description": self.queries.describe(edge),
            })
        return listing

    # ─────────────────────────────────────────
    # Relationship types (delegated)
    # ─────────────────────────────────────────

    def register_type(self, tenant_id: int, slug: str, label: str, category: str,
                      inverse_slug: Optional[str] = None, sort_order: int = 0,
                      inverse_label: Optional[str] = None) -> RelationshipType:
        return self.registry.register(tenant_id, slug, label, category,
                                      inverse_slug=inverse_slug, sort_order=sort_order,
                                      inverse_label=inverse_label)

    def delete_type(self, tenant_id: int, slug: str, policy: Optional[str] = None) -> int:
        return self.registry.delete(tenant_id, slug, policy=policy)

    def relationship_types(self, tenant_id: int) -> list[RelationshipType]:
        return self.registry.list_for_tenant(tenant_id)

    def grouped_types(self, tenant_id: int) -> dict[str, list[dict]]:
        return self.registry.grouped_by_category(tenant_id)

    # ─────────────────────────────────────────
    # Query operations (delegated)
    # ─────────────────────────────────────────

    def father(self, member_id: int) -> set[RelatedMember]:
        return self.queries.father(member_id)

    def mother(self, member_id: int) -> set[RelatedMember]:
        return self.queries.mother(member_id)

    def parents(self, member_id: int) -> set[RelatedMember]:
        return self.queries.parents(member_id)

    def children(self, member_id: int) -> set[RelatedMember]:
        return self.queries.children(member_id)

    def step_parents(self, member_id: int) -> set[RelatedMember]:
        return self.queries.step_parents(member_id)

    def spouses(self, member_id: int) -> set[RelatedMember]:
        return self.queries.spouses(member_id)

    def siblings(self, member_id: int) -> set[RelatedMember]:
        return self.queries.siblings(member_id)

    def grandparents(self, member_id: int) -> set[RelatedMember]:
        return self.queries.grandparents(member_id)

    def grandchildren(self, member_id: int) -> set[RelatedMember]:
        return self.queries.grandchildren(member_id)

    def all_related(self, member_id: int) -> set[RelatedMember]:
        return self.queries.all_related(member_id)

    def family_tree(self, member_id: int) -> dict:
        return self.queries.family_tree(member_id)
