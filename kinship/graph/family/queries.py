"""Derived relation queries.

Pure read layer: each accessor filters a member's outbound edges through
the static classification table. Nothing is traversed beyond one hop.
"""

from typing import Iterable, Optional

from kinship.graph.errors import MemberNotFound
from kinship.graph.family.edges import RelationshipEdgeStore
from kinship.graph.member_store import MemberStore
from kinship.graph.models import RelatedMember, RelationshipEdge
from kinship.graph.taxonomy import FATHER_TYPES, MOTHER_TYPES, DerivedRelation, slugs_for
from kinship.graph.type_registry import RelationshipTypeRegistry
from kinship.models import Gender, Member


class DerivedRelationQueries:
    """Query operations for family relationships."""

    def __init__(self, edges: RelationshipEdgeStore, members: MemberStore,
                 registry: Optional[RelationshipTypeRegistry] = None):
        self.edges = edges
        self.members = members
        self.registry = registry or edges.registry

    def by_relation(self, member_id: int, *relations: DerivedRelation) -> set[RelatedMember]:
        """Outbound neighbours whose edge type is classified under any of ``relations``."""
        return self.edges.edges_from(member_id, slugs_for(*relations))

    def father(self, member_id: int) -> set[RelatedMember]:
        """Father edges whose target is recorded as male.

        A correctly typed edge to a member with no gender set is *not*
        returned; use ``parents`` for the gender-blind set.
        """
        return self._gendered(member_id, FATHER_TYPES, Gender.MALE)

    def mother(self, member_id: int) -> set[RelatedMember]:
        """Mother edges whose target is recorded as female."""
        return self._gendered(member_id, MOTHER_TYPES, Gender.FEMALE)

    def parents(self, member_id: int) -> set[RelatedMember]:
        """Parents and step-parents, no gender filter."""
        return self.by_relation(member_id, DerivedRelation.PARENT, DerivedRelation.STEP_PARENT)

    def children(self, member_id: int) -> set[RelatedMember]:
        """Children and step-children; the inverse of ``parents``."""
        return self.by_relation(member_id, DerivedRelation.CHILD, DerivedRelation.STEP_CHILD)

    def step_parents(self, member_id: int) -> set[RelatedMember]:
        return self.by_relation(member_id, DerivedRelation.STEP_PARENT)

    def step_children(self, member_id: int) -> set[RelatedMember]:
        return self.by_relation(member_id, DerivedRelation.STEP_CHILD)

    def spouses(self, member_id: int) -> set[RelatedMember]:
        return self.by_relation(member_id, DerivedRelation.SPOUSE)

    def siblings(self, member_id: int) -> set[RelatedMember]:
        return self.by_relation(member_id, DerivedRelation.SIBLING)

    def grandparents(self, member_id: int) -> set[RelatedMember]:
        return self.by_relation(member_id, DerivedRelation.GRANDPARENT)

    def grandchildren(self, member_id: int) -> set[RelatedMember]:
        return self.by_relation(member_id, DerivedRelation.GRANDCHILD)

    def all_related(self, member_id: int) -> set[RelatedMember]:
        """Every outbound edge regardless of category."""
        return self.edges.edges_from(member_id)

    def family_tree(self, member_id: int) -> dict:
        """
        Assemble the immediate tree around a member.

        Returns:
            Dict with the member itself and, per relation, a list of
            ``{"member": Member, "type_slug": str}`` sorted by member id.
            ``other`` holds edges outside every classification set.

        Raises:
            MemberNotFound: unknown member
        """
        member = self.members.get_member(member_id)
        if member is None:
            raise MemberNotFound(member_id)

        sections = {
            "father": self.father(member_id),
            "mother": self.mother(member_id),
            "parents": self.parents(member_id),
            "step_parents": self.step_parents(member_id),
            "spouses": self.spouses(member_id),
            "siblings": self.siblings(member_id),
            "children": self.children(member_id),
            "step_children": self.step_children(member_id),
            "grandparents": self.grandparents(member_id),
            "grandchildren": self.grandchildren(member_id),
        }
        everything = self.all_related(member_id)
        classified = slugs_for(*DerivedRelation)
        sections["other"] = {rel for rel in everything if rel.type_slug not in classified}

        related = self.members.get_many(rel.member_id for rel in everything)

        tree = {"member": member}
        for name, rels in sections.items():
            tree[name] = self._resolve(rels, related)
        return tree

    def describe(self, edge: RelationshipEdge) -> str:
        """Human-readable sentence, e.g. "Bob is the father of Alice"."""
        people = self.members.get_many([edge.from_member_id, edge.to_member_id])
        subject = people.get(edge.from_member_id)
        related = people.get(edge.to_member_id)
        subject_name = subject.display_name if subject else "Unknown"
        related_name = related.display_name if related else "Unknown"

        rel_type = self.registry.get(edge.type_slug)
        label = rel_type.label.lower() if rel_type else edge.type_slug
        return f"{related_name} is the {label} of {subject_name}"

    def _gendered(self, member_id: int, type_slugs: frozenset[str], gender: Gender) -> set[RelatedMember]:
        candidates = self.edges.edges_from(member_id, type_slugs)
        genders = self.members.genders(rel.member_id for rel in candidates)
        return {rel for rel in candidates if genders.get(rel.member_id) == gender}

    def _resolve(self, rels: Iterable[RelatedMember], related: dict[int, Member]) -> list[dict]:
        return [
            {"member": related[rel.member_id], "type_slug": rel.type_slug}
            for rel in sorted(rels)
            if rel.member_id in related
        ]
