"""Test the relationship type registry."""

import pytest

from kinship.graph import taxonomy
from kinship.graph.errors import (
    DuplicateSlug,
    InvalidInverse,
    NotFound,
    ProtectedType,
    TypeInUse,
    UnknownType,
)
from kinship.graph.type_registry import RelationshipTypeRegistry


class TestResolve:
    """Tests for slug resolution."""

    def test_system_types_seeded(self, registry):
        """Should seed every system type."""
        for rel_type in taxonomy.SYSTEM_TYPES:
            resolved = registry.resolve(rel_type.slug)
            assert resolved.is_system
            assert resolved.is_global
            assert resolved.inverse_slug == rel_type.inverse_slug

    def test_seeding_is_idempotent(self, registry, db_path):
        """Should not duplicate system types when opened again."""
        RelationshipTypeRegistry(db_path=db_path)
        slugs = [t.slug for t in registry.list_for_tenant(1)]
        assert len(slugs) == len(set(slugs)) == len(taxonomy.SYSTEM_TYPES)

    def test_unknown_slug(self, registry):
        """Should raise UnknownType, which is a NotFound."""
        with pytest.raises(UnknownType):
            registry.resolve("second_cousin_once_removed")
        with pytest.raises(NotFound):
            registry.resolve("nope")

    def test_tenant_type_hidden_from_other_tenants(self, registry):
        """Should not resolve another tenant's private type."""
        registry.register(1, "neighbor", "Neighbor", "non_family", inverse_slug="neighbor")
        assert registry.resolve("neighbor", tenant_id=1).tenant_id == 1
        with pytest.raises(UnknownType):
            registry.resolve("neighbor", tenant_id=2)


class TestInverse:
    """Tests for inverse resolution."""

    def test_father_inverse(self, registry):
        assert registry.inverse_of("father") == "child_of_father"
        assert registry.inverse_of("child_of_father") == "father"

    @pytest.mark.parametrize("slug", ["spouse", "sibling", "cousin", "friend"])
    def test_self_inverse_types(self, registry, slug):
        """Should return the slug itself for symmetric types."""
        assert registry.inverse_of(slug) == slug
        assert registry.resolve(slug).is_symmetric

    def test_null_inverse_returns_same_slug(self, registry):
        """Should treat a missing inverse as self-inverse."""
        registry.register(1, "housemate", "Housemate", "non_family")
        assert registry.resolve("housemate").inverse_slug is None
        assert registry.inverse_of("housemate") == "housemate"

    def test_inverse_of_unknown(self, registry):
        with pytest.raises(UnknownType):
            registry.inverse_of("missing")


class TestListing:
    """Tests for tenant listings."""

    def test_ordered_by_sort_order(self, registry):
        """Should order by sort order ascending."""
        orders = [t.sort_order for t in registry.list_for_tenant(1)]
        assert orders == sorted(orders)

    def test_tenant_types_interleaved(self, registry):
        """Should place tenant types by their own sort order, not at the end."""
        registry.register(5, "mentor", "Mentor", "non_family", inverse_slug="mentee",
                          inverse_label="Mentee", sort_order=6)
        slugs = [t.slug for t in registry.list_for_tenant(5)]
        assert slugs.index("mentor") < slugs.index("friend")
        assert slugs.index("mentor") > slugs.index("partner")
        assert "mentor" not in [t.slug for t in registry.list_for_tenant(6)]

    def test_grouped_by_category(self, registry):
        """Should group into the three categories with slug and label only."""
        grouped = registry.grouped_by_category(1)
        assert set(grouped) == {"immediate", "extended", "non_family"}
        for entries in grouped.values():
            for entry in entries:
                assert set(entry) == {"slug", "label"}
        assert {"slug": "father", "label": "Father"} in grouped["immediate"]
        assert {"slug": "friend", "label": "Friend"} in grouped["non_family"]


class TestRegister:
    """Tests for tenant type registration."""

    def test_register_symmetric(self, registry):
        rel_type = registry.register(1, "neighbor", "Neighbor", "non_family", inverse_slug="neighbor")
        assert rel_type.is_symmetric
        assert not rel_type.is_system
        assert rel_type.tenant_id == 1

    def test_register_pair(self, registry):
        """Should create both halves of a pair with inverse_label."""
        registry.register(1, "mentor", "Mentor", "non_family",
                          inverse_slug="mentee", inverse_label="Mentee")
        assert registry.inverse_of("mentor") == "mentee"
        assert registry.inverse_of("mentee") == "mentor"

    def test_duplicate_system_slug(self, registry):
        """Should refuse to redefine a system slug."""
        with pytest.raises(DuplicateSlug):
            registry.register(1, "father", "Dad", "immediate")

    def test_duplicate_across_tenants(self, registry):
        """Should keep slugs unique across tenants."""
        registry.register(1, "neighbor", "Neighbor", "non_family", inverse_slug="neighbor")
        with pytest.raises(DuplicateSlug):
            registry.register(2, "neighbor", "Neighbour", "non_family", inverse_slug="neighbor")

    def test_duplicate_inverse_when_creating_pair(self, registry):
        with pytest.raises(DuplicateSlug):
            registry.register(1, "elder", "Elder", "extended",
                              inverse_slug="child", inverse_label="Junior")
        assert registry.get("elder") is None

    def test_missing_inverse(self, registry):
        """Should refuse an inverse that does not resolve."""
        with pytest.raises(InvalidInverse):
            registry.register(1, "mentor", "Mentor", "non_family", inverse_slug="mentee")
        assert registry.get("mentor") is None

    def test_inverse_must_point_back(self, registry):
        """Should refuse an inverse whose own inverse is something else."""
        with pytest.raises(InvalidInverse):
            registry.register(1, "guardian", "Guardian", "extended", inverse_slug="child")

    def test_unknown_category(self, registry):
        with pytest.raises(ValueError):
            registry.register(1, "thing", "Thing", "cosmic")


class TestDelete:
    """Tests for type deletion policies."""

    def test_system_type_protected(self, registry):
        with pytest.raises(ProtectedType):
            registry.delete(1, "father")

    def test_other_tenant_type_unknown(self, registry):
        registry.register(1, "neighbor", "Neighbor", "non_family", inverse_slug="neighbor")
        with pytest.raises(UnknownType):
            registry.delete(2, "neighbor")

    def test_delete_unused_pair(self, registry):
        """Should delete a type and its inverse partner together."""
        registry.register(1, "mentor", "Mentor", "non_family",
                          inverse_slug="mentee", inverse_label="Mentee")
        assert registry.delete(1, "mentee", policy="block") == 0
        assert registry.get("mentor") is None
        assert registry.get("mentee") is None

    def test_blocked_while_referenced(self, registry, edges, add_member):
        """Should refuse deletion while edges use the type."""
        registry.register(1, "neighbor", "Neighbor", "non_family", inverse_slug="neighbor")
        edges.link(add_member("A"), add_member("B"), "neighbor")

        with pytest.raises(TypeInUse):
            registry.delete(1, "neighbor", policy="block")
        assert registry.get("neighbor") is not None

    def test_cascade_removes_edge_pairs(self, registry, edges, add_member):
        """Should remove referencing edge pairs with the type."""
        registry.register(1, "mentor", "Mentor", "non_family",
                          inverse_slug="mentee", inverse_label="Mentee")
        a, b = add_member("A"), add_member("B")
        edges.link(a, b, "mentor")
        edges.link(a, b, "friend")

        assert registry.delete(1, "mentor", policy="cascade") == 2
        assert registry.get("mentor") is None
        assert edges.edges_from(a) == {(b, "friend")}
        assert edges.edges_from(b) == {(a, "friend")}
        assert edges.verify_pairing() == []

    def test_unknown_policy(self, registry):
        registry.register(1, "neighbor", "Neighbor", "non_family", inverse_slug="neighbor")
        with pytest.raises(ValueError):
            registry.delete(1, "neighbor", policy="shrug")


class TestClassification:
    """Tests for the static classification table."""

    def test_seeded_registry_is_consistent(self, registry):
        assert registry.check_classification() == []

    def test_each_slug_in_exactly_one_set(self):
        """Should not list any slug under two relations."""
        seen = []
        for relation in taxonomy.DerivedRelation:
            seen.extend(taxonomy.slugs_for(relation))
        assert len(seen) == len(set(seen))

    def test_classification_of(self, registry):
        assert registry.classification_of("father") == taxonomy.DerivedRelation.PARENT
        assert registry.classification_of("child_of_mother") == taxonomy.DerivedRelation.CHILD
        assert registry.classification_of("friend") is None

    def test_detects_missing_classified_type(self, registry, db_path):
        """Should report a classified slug absent from the catalog."""
        from kinship.graph.storage import connect

        with connect(db_path) as conn:
            conn.execute("DELETE FROM relationship_types WHERE slug = 'grandchild_of_gm'")

        problems = registry.check_classification()
        assert any("grandchild_of_gm" in p for p in problems)

    def test_detects_tenant_row_on_classified_slug(self, registry, db_path):
        from kinship.graph.storage import connect

        with connect(db_path) as conn:
            conn.execute(
                "UPDATE relationship_types SET is_system = 0, tenant_id = 1 WHERE slug = 'grandmother'"
            )

        problems = registry.check_classification()
        assert "classified type 'grandmother' is not a system type" in problems

    def test_detects_inverse_not_pointing_back(self, registry, db_path):
        from kinship.graph.storage import connect

        with connect(db_path) as conn:
            conn.execute(
                "UPDATE relationship_types SET inverse_slug = 'grandchild_of_gf' WHERE slug = 'grandmother'"
            )

        problems = registry.check_classification()
        assert "inverse 'grandchild_of_gf' of 'grandmother' does not point back" in problems


class TestSeeding:
    """Tests for taxonomy versioning of the seeded catalog."""

    def test_stored_version(self, registry):
        assert registry.stored_version() == taxonomy.TAXONOMY_VERSION

    def test_older_version_rewrites_system_rows(self, registry, db_path):
        from kinship.graph.storage import connect

        with connect(db_path) as conn:
            conn.execute("UPDATE relationship_types SET label = 'Dad' WHERE slug = 'father'")
            conn.execute("PRAGMA user_version = 1")

        reseeded = RelationshipTypeRegistry(db_path=db_path)

        assert reseeded.get("father").label == "Father"
        assert reseeded.stored_version() == taxonomy.TAXONOMY_VERSION

    def test_current_version_leaves_rows_alone(self, registry, db_path):
        from kinship.graph.storage import connect

        with connect(db_path) as conn:
            conn.execute("UPDATE relationship_types SET label = 'Dad' WHERE slug = 'father'")

        assert RelationshipTypeRegistry(db_path=db_path).get("father").label == "Dad"

    def test_upgrade_skips_tenant_rows(self, registry, db_path):
        """A tenant row holding a system slug is kept and flagged, not overwritten."""
        from kinship.graph.storage import connect

        with connect(db_path) as conn:
            conn.execute("""
                UPDATE relationship_types SET is_system = 0, tenant_id = 1, label = 'Kid'
                WHERE slug = 'child_of_father'
            """)
            conn.execute("PRAGMA user_version = 1")

        reseeded = RelationshipTypeRegistry(db_path=db_path)

        kept = reseeded.get("child_of_father")
        assert kept.label == "Kid"
        assert kept.tenant_id == 1
        assert "classified type 'child_of_father' is not a system type" in reseeded.check_classification()

    def test_grouping_follows_categories(self, registry):
        assert list(registry.grouped_by_category(1)) == list(taxonomy.CATEGORIES)
        assert all(taxonomy.CATEGORIES.values())
