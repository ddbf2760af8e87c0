"""
Relationship Type Registry - catalog of relationship types and their inverses.

Global system types are seeded from ``taxonomy.SYSTEM_TYPES`` on start-up;
tenants may register private types on top. Slugs are unique across both
scopes.

Database: shares the graph database with RelationshipEdgeStore so that
edges can never reference a missing type.
"""

from typing import Optional

from kinship.config import settings
from kinship.graph import taxonomy
from kinship.graph.errors import (
    DuplicateSlug,
    InvalidInverse,
    ProtectedType,
    TypeInUse,
    UnknownType,
)
from kinship.graph.models import RelationshipType
from kinship.graph.storage import connect, ensure_schema, write_transaction
from kinship.graph.taxonomy import DerivedRelation
from kinship.logging import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, slug, label, category, inverse_slug, is_system, sort_order, tenant_id"


class RelationshipTypeRegistry:
    """Manages relationship type definitions."""

    def __init__(self, db_path: Optional[str] = None, timeout: Optional[float] = None):
        self.db_path = db_path or settings.database.graph_db_path
        self.timeout = timeout if timeout is not None else settings.database.busy_timeout
        ensure_schema(self.db_path, self.timeout)
        self._seed()

    def _seed(self):
        """
        Insert any system types missing from the catalog.

        When the stored taxonomy version (``PRAGMA user_version``) is older
        than ``TAXONOMY_VERSION``, existing system rows are rewritten from
        ``SYSTEM_TYPES`` as well. Tenant rows are never touched; a tenant row
        holding a system slug is reported as shadowed.
        """
        with write_transaction(self.db_path, self.timeout) as conn:
            version = conn.execute("PRAGMA user_version").fetchone()[0]
            inserted = updated = 0
            for rel_type in taxonomy.SYSTEM_TYPES:
                values = (rel_type.label, rel_type.category, rel_type.inverse_slug,
                          rel_type.sort_order, rel_type.slug)
                inserted += conn.execute("""
                    INSERT OR IGNORE INTO relationship_types
                        (label, category, inverse_slug, sort_order, slug, is_system, tenant_id)
                    VALUES (?, ?, ?, ?, ?, 1, NULL)
                """, values).rowcount
                if version < taxonomy.TAXONOMY_VERSION:
                    updated += conn.execute("""
                        UPDATE relationship_types
                        SET label = ?, category = ?, inverse_slug = ?, sort_order = ?
                        WHERE slug = ? AND is_system = 1
                    """, values).rowcount

            shadowed = [
                row["slug"] for row in conn.execute(
                    f"SELECT slug FROM relationship_types WHERE is_system = 0 AND slug IN "
                    f"({', '.join('?' for _ in taxonomy.SYSTEM_TYPES)}) ORDER BY slug",
                    [t.slug for t in taxonomy.SYSTEM_TYPES]
                )
            ]
            if version < taxonomy.TAXONOMY_VERSION:
                conn.execute(f"PRAGMA user_version = {int(taxonomy.TAXONOMY_VERSION)}")

        if inserted or version < taxonomy.TAXONOMY_VERSION:
            logger.info("relationship_types_seeded", inserted=inserted, upgraded=updated,
                        from_version=version, version=taxonomy.TAXONOMY_VERSION)
        if shadowed:
            logger.warning("system_types_shadowed", slugs=shadowed)

    def stored_version(self) -> int:
        """Taxonomy version the catalog was last seeded with."""
        with connect(self.db_path, self.timeout) as conn:
            return conn.execute("PRAGMA user_version").fetchone()[0]

    # ─────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────

    def get(self, slug: str) -> Optional[RelationshipType]:
        """Get type by slug regardless of tenant."""
        with connect(self.db_path, self.timeout) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM relationship_types WHERE slug = ?", (slug,)
            ).fetchone()
            return self._row_to_type(row) if row else None

    def resolve(self, slug: str, tenant_id: Optional[int] = None) -> RelationshipType:
        """
        Resolve a slug to its type.

        With ``tenant_id`` the type must be global or owned by that tenant.

        Raises:
            UnknownType: slug does not exist or is private to another tenant
        """
        rel_type = self.get(slug)
        if rel_type is None:
            raise UnknownType(slug, tenant_id)
        if tenant_id is not None and rel_type.tenant_id not in (None, tenant_id):
            raise UnknownType(slug, tenant_id)
        return rel_type

    def inverse_of(self, slug: str) -> str:
        """Inverse slug; a type without one is its own inverse."""
        return self.resolve(slug).inverse_slug or slug

    def list_for_tenant(self, tenant_id: Optional[int] = None) -> list[RelationshipType]:
        """Global types plus the tenant's own, by sort order."""
        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(f"""
                SELECT {_COLUMNS} FROM relationship_types
                WHERE tenant_id IS NULL OR tenant_id = ?
                ORDER BY sort_order, id
            """, (tenant_id,)).fetchall()
            return [self._row_to_type(row) for row in rows]

    def grouped_by_category(self, tenant_id: Optional[int] = None) -> dict[str, list[dict]]:
        """Types grouped by category with only slug and label, for presentation."""
        grouped: dict[str, list[dict]] = {category: [] for category in taxonomy.CATEGORIES}
        for rel_type in self.list_for_tenant(tenant_id):
            if rel_type.category in grouped:
                grouped[rel_type.category].append({"slug": rel_type.slug, "label": rel_type.label})
        return grouped

    # ─────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────

    def register(
        self,
        tenant_id: int,
        slug: str,
        label: str,
        category: str,
        inverse_slug: Optional[str] = None,
        sort_order: int = 0,
        inverse_label: Optional[str] = None,
    ) -> RelationshipType:
        """
        Register a tenant-private relationship type.

        Args:
            tenant_id: Owning tenant
            slug: Unique slug (must not clash with any global or tenant type)
            label: Display label
            category: immediate, extended or non_family
            inverse_slug: Inverse type; equal to ``slug`` for symmetric types
            sort_order: Display ordering
            inverse_label: When given and ``inverse_slug`` does not exist yet,
                the inverse type is created in the same transaction

        Returns:
            The registered type

        Raises:
            DuplicateSlug: slug (or the new inverse slug) already exists
            InvalidInverse: inverse does not exist or does not point back
        """
        if category not in taxonomy.CATEGORIES:
            raise ValueError(f"Unknown category '{category}'")

        with write_transaction(self.db_path, self.timeout) as conn:
            if self._slug_exists(conn, slug):
                raise DuplicateSlug(slug)

            create_inverse = False
            if inverse_slug is not None and inverse_slug != slug:
                row = conn.execute(
                    "SELECT inverse_slug, tenant_id FROM relationship_types WHERE slug = ?",
                    (inverse_slug,)
                ).fetchone()
                if row is None:
                    if inverse_label is None:
                        raise InvalidInverse(slug, inverse_slug)
                    create_inverse = True
                elif inverse_label is not None:
                    raise DuplicateSlug(inverse_slug)
                elif row["tenant_id"] not in (None, tenant_id):
                    raise InvalidInverse(slug, inverse_slug)
                elif row["inverse_slug"] != slug:
                    raise InvalidInverse(slug, inverse_slug, "inverse does not point back")

            self._insert(conn, tenant_id, slug, label, category, inverse_slug, sort_order)
            if create_inverse:
                self._insert(conn, tenant_id, inverse_slug, inverse_label, category, slug, sort_order)

        logger.info("relationship_type_registered", tenant_id=tenant_id, slug=slug,
                    inverse_slug=inverse_slug, created_inverse=create_inverse)
        return self.resolve(slug, tenant_id)

    def delete(self, tenant_id: int, slug: str, policy: Optional[str] = None) -> int:
        """
        Delete a tenant-owned type together with its tenant-owned inverse partner.

        Args:
            tenant_id: Tenant requesting the deletion
            slug: Type to delete
            policy: "block" or "cascade"; defaults to GraphSettings.type_deletion_policy

        Returns:
            Number of edges removed (always 0 under "block")

        Raises:
            UnknownType: no such type for this tenant
            ProtectedType: system or global type
            TypeInUse: edges (under "block") or other types still reference it
        """
        policy = policy or settings.graph.type_deletion_policy
        if policy not in ("block", "cascade"):
            raise ValueError(f"Unknown deletion policy '{policy}'")

        rel_type = self.resolve(slug, tenant_id)
        if rel_type.is_system or rel_type.is_global:
            raise ProtectedType(slug)

        with write_transaction(self.db_path, self.timeout) as conn:
            group = {slug}
            if rel_type.inverse_slug and rel_type.inverse_slug != slug:
                partner = conn.execute(
                    "SELECT inverse_slug, tenant_id, is_system FROM relationship_types WHERE slug = ?",
                    (rel_type.inverse_slug,)
                ).fetchone()
                if (partner and partner["tenant_id"] == tenant_id and not partner["is_system"]
                        and partner["inverse_slug"] == slug):
                    group.add(rel_type.inverse_slug)

            placeholders = ", ".join("?" for _ in group)
            members = list(group)

            referencing = conn.execute(f"""
                SELECT slug FROM relationship_types
                WHERE inverse_slug IN ({placeholders}) AND slug NOT IN ({placeholders})
            """, members + members).fetchall()
            if referencing:
                raise TypeInUse(slug, f"inverse of '{referencing[0]['slug']}'")

            edge_count = conn.execute(
                f"SELECT COUNT(*) FROM relationship_edges WHERE type_slug IN ({placeholders})",
                members
            ).fetchone()[0]
            if edge_count and policy == "block":
                raise TypeInUse(slug, f"{edge_count} edge(s) reference it")

            # Every edge of a group type pairs with an edge of a group type,
            # so removing them all keeps the pairing intact.
            removed = conn.execute(
                f"DELETE FROM relationship_edges WHERE type_slug IN ({placeholders})", members
            ).rowcount
            conn.execute(
                f"DELETE FROM relationship_types WHERE slug IN ({placeholders})", members
            )

        logger.info("relationship_type_deleted", tenant_id=tenant_id, slugs=sorted(group),
                    policy=policy, edges_removed=removed)
        return removed

    # ─────────────────────────────────────────
    # Classification
    # ─────────────────────────────────────────

    def classification_of(self, slug: str) -> Optional[DerivedRelation]:
        """Derived-query set the slug belongs to, if any."""
        return taxonomy.classify(slug)

    def check_classification(self) -> list[str]:
        """
        Check the static classification table against the catalog.

        Every classified slug must be a registered system type whose inverse
        points back to it and sits in the mirrored set.

        Returns:
            Problem descriptions; empty when consistent
        """
        catalog = {rel_type.slug: rel_type for rel_type in self._all_types()}
        problems = []
        for slug, relation in taxonomy.CLASSIFICATION.items():
            rel_type = catalog.get(slug)
            if rel_type is None:
                problems.append(f"classified type '{slug}' is not registered")
                continue
            if not rel_type.is_system:
                problems.append(f"classified type '{slug}' is not a system type")
            inverse = rel_type.inverse_slug or slug
            inverse_type = catalog.get(inverse)
            if inverse_type is None or (inverse_type.inverse_slug or inverse) != slug:
                problems.append(f"inverse '{inverse}' of '{slug}' does not point back")
            expected = taxonomy.MIRROR[relation]
            actual = taxonomy.classify(inverse)
            if actual != expected:
                problems.append(
                    f"'{slug}' is {relation.value} but its inverse '{inverse}' is "
                    f"{actual.value if actual else 'unclassified'}, expected {expected.value}"
                )
        return problems

    def _all_types(self) -> list[RelationshipType]:
        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM relationship_types").fetchall()
            return [self._row_to_type(row) for row in rows]

    def _slug_exists(self, conn, slug: str) -> bool:
        return conn.execute(
            "SELECT 1 FROM relationship_types WHERE slug = ?", (slug,)
        ).fetchone() is not None

    def _insert(self, conn, tenant_id, slug, label, category, inverse_slug, sort_order):
        conn.execute("""
            INSERT INTO relationship_types
                (slug, label, category, inverse_slug, is_system, sort_order, tenant_id)
            VALUES (?, ?, ?, ?, 0, ?, ?)
        """, (slug, label, category, inverse_slug, sort_order, tenant_id))

    def _row_to_type(self, row) -> RelationshipType:
        """Convert database row to RelationshipType."""
        return RelationshipType(
            id=row["id"],
            slug=row["slug"],
            label=row["label"],
            category=row["category"],
            inverse_slug=row["inverse_slug"],
            is_system=bool(row["is_system"]),
            sort_order=row["sort_order"],
            tenant_id=row["tenant_id"],
        )
