"""Relationship edge store: the only place edges are written or deleted.

Edges always come in pairs. ``link`` writes the forward edge and its
inverse, ``unlink`` deletes both, and each runs as one SQLite transaction
that takes the write lock up front (``BEGIN IMMEDIATE``). The member store
must share the database file: member existence and tenant are re-read
inside that transaction.
"""

from typing import Iterable, Optional

from kinship.config import settings
from kinship.graph.errors import CrossTenantEdge, MemberNotFound, SelfEdge
from kinship.graph.member_store import MemberStore
from kinship.graph.models import EdgePair, RelatedMember, RelationshipEdge
from kinship.graph.storage import connect, ensure_schema, write_transaction
from kinship.graph.type_registry import RelationshipTypeRegistry
from kinship.logging import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, tenant_id, from_member_id, to_member_id, type_slug, created_at"


class RelationshipEdgeStore:
    """Bidirectional typed edges between members."""

    def __init__(self, registry: RelationshipTypeRegistry, members: MemberStore,
                 db_path: Optional[str] = None, timeout: Optional[float] = None):
        self.registry = registry
        self.members = members
        self.db_path = db_path or registry.db_path
        self.timeout = timeout if timeout is not None else settings.database.busy_timeout
        ensure_schema(self.db_path, self.timeout)

    # ─────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────

    def link(self, member_a: int, member_b: int, type_slug: str) -> EdgePair:
        """
        Record that member_b is the <type_slug> of member_a, plus the inverse.

        Idempotent: linking an existing edge returns the stored pair with
        ``created=False``.

        Raises:
            SelfEdge: member_a == member_b
            MemberNotFound: either member is unknown
            CrossTenantEdge: members belong to different tenants
            UnknownType: slug not visible to the members' tenant
        """
        if member_a == member_b:
            raise SelfEdge(member_a)

        tenant_a = self._shared_tenant(member_a, member_b)
        rel_type = self.registry.resolve(type_slug, tenant_a)
        inverse_slug = rel_type.inverse_slug or rel_type.slug

        with write_transaction(self.db_path, self.timeout) as conn:
            # Members may have been removed since the check above
            self._shared_tenant(member_a, member_b, conn)
            existing = self._fetch(conn, member_a, member_b, rel_type.slug)
            self._insert(conn, tenant_a, member_a, member_b, rel_type.slug)
            self._insert(conn, tenant_a, member_b, member_a, inverse_slug)
            edge = self._fetch(conn, member_a, member_b, rel_type.slug)
            inverse_edge = self._fetch(conn, member_b, member_a, inverse_slug)

        created = existing is None
        if created:
            logger.info("edge_pair_linked", tenant_id=tenant_a, from_member=member_a,
                        to_member=member_b, type_slug=rel_type.slug, inverse_slug=inverse_slug)
        else:
            logger.debug("edge_pair_exists", from_member=member_a, to_member=member_b,
                         type_slug=rel_type.slug)
        return EdgePair(edge=edge, inverse_edge=inverse_edge, created=created)

    def unlink(self, member_a: int, member_b: int, type_slug: str) -> int:
        """
        Delete the edge (a, b, type) and its inverse (b, a, inverse).

        Missing edges are not an error.

        Returns:
            Number of edge rows removed (0, 1 or 2)
        """
        inverse_slug = self.registry.inverse_of(type_slug)

        with write_transaction(self.db_path, self.timeout) as conn:
            removed = self._delete(conn, member_a, member_b, type_slug)
            if (member_b, member_a, inverse_slug) != (member_a, member_b, type_slug):
                removed += self._delete(conn, member_b, member_a, inverse_slug)

        if removed:
            logger.info("edge_pair_unlinked", from_member=member_a, to_member=member_b,
                        type_slug=type_slug, inverse_slug=inverse_slug, removed=removed)
        return removed

    def remove_member_edges(self, member_id: int, conn=None) -> int:
        """Delete every edge pair touching a member, before the member is removed.

        Both halves of each pair touch the member, so this leaves no
        dangling inverse behind. Pass ``conn`` to run inside the caller's
        write transaction.
        """
        if conn is None:
            with write_transaction(self.db_path, self.timeout) as conn:
                return self.remove_member_edges(member_id, conn)

        removed = conn.execute(
            "DELETE FROM relationship_edges WHERE from_member_id = ? OR to_member_id = ?",
            (member_id, member_id)
        ).rowcount

        if removed:
            logger.info("member_edges_removed", member_id=member_id, removed=removed)
        return removed

    # ─────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────

    def edges_from(self, member_id: int, type_slugs: Optional[Iterable[str]] = None) -> set[RelatedMember]:
        """Outbound neighbours as (member_id, type_slug), optionally filtered by type."""
        return {edge.related for edge in self.list_from(member_id, type_slugs)}

    def edges_to(self, member_id: int) -> set[RelatedMember]:
        """Members with an edge pointing at this one, with that edge's type."""
        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(
                "SELECT from_member_id, type_slug FROM relationship_edges WHERE to_member_id = ?",
                (member_id,)
            ).fetchall()
            return {RelatedMember(row["from_member_id"], row["type_slug"]) for row in rows}

    def list_from(self, member_id: int, type_slugs: Optional[Iterable[str]] = None) -> list[RelationshipEdge]:
        """Outbound edges of a member in creation order."""
        query = f"SELECT {_COLUMNS} FROM relationship_edges WHERE from_member_id = ?"
        params: list = [member_id]
        if type_slugs is not None:
            slugs = list(type_slugs)
            if not slugs:
                return []
            query += f" AND type_slug IN ({', '.join('?' for _ in slugs)})"
            params.extend(slugs)
        query += " ORDER BY id"

        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_edge(row) for row in rows]

    def get_edge(self, from_member: int, to_member: int, type_slug: str) -> Optional[RelationshipEdge]:
        """Get a single directed edge."""
        with connect(self.db_path, self.timeout) as conn:
            return self._fetch(conn, from_member, to_member, type_slug)

    def pairs_for_tenant(self, tenant_id: int) -> list[RelationshipEdge]:
        """Each pair of a tenant once, seen from its lower member id."""
        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(f"""
                SELECT {_COLUMNS} FROM relationship_edges
                WHERE tenant_id = ? AND from_member_id < to_member_id
                ORDER BY from_member_id, to_member_id, id
            """, (tenant_id,)).fetchall()
            return [self._row_to_edge(row) for row in rows]

    def count_by_type(self, type_slug: str) -> int:
        """Number of edges using a type."""
        with connect(self.db_path, self.timeout) as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM relationship_edges WHERE type_slug = ?", (type_slug,)
            ).fetchone()[0]

    def verify_pairing(self, tenant_id: Optional[int] = None) -> list[RelationshipEdge]:
        """
        Consistency check: edges whose inverse partner is missing.

        Returns:
            Orphaned edges; empty when every pair is complete
        """
        query = f"""
            SELECT {', '.join('e.' + c.strip() for c in _COLUMNS.split(','))}
            FROM relationship_edges e
            LEFT JOIN relationship_types t ON t.slug = e.type_slug
            LEFT JOIN relationship_edges r
                ON r.from_member_id = e.to_member_id
               AND r.to_member_id = e.from_member_id
               AND r.type_slug = COALESCE(t.inverse_slug, e.type_slug)
            WHERE r.id IS NULL
        """
        params: list = []
        if tenant_id is not None:
            query += " AND e.tenant_id = ?"
            params.append(tenant_id)
        query += " ORDER BY e.id"

        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(query, params).fetchall()
            orphans = [self._row_to_edge(row) for row in rows]

        if orphans:
            logger.warning("edge_pairing_violations", count=len(orphans), tenant_id=tenant_id)
        return orphans

    # ─────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────

    def _shared_tenant(self, member_a: int, member_b: int, conn=None) -> int:
        """Tenant of two members; both must exist and share it."""
        tenant_a = self.members.tenant_of(member_a, conn)
        if tenant_a is None:
            raise MemberNotFound(member_a)
        tenant_b = self.members.tenant_of(member_b, conn)
        if tenant_b is None:
            raise MemberNotFound(member_b)
        if tenant_a != tenant_b:
            raise CrossTenantEdge(member_a, tenant_a, member_b, tenant_b)
        return tenant_a

    def _insert(self, conn, tenant_id: int, from_member: int, to_member: int, type_slug: str):
        conn.execute("""
            INSERT OR IGNORE INTO relationship_edges (tenant_id, from_member_id, to_member_id, type_slug)
            VALUES (?, ?, ?, ?)
        """, (tenant_id, from_member, to_member, type_slug))

    def _delete(self, conn, from_member: int, to_member: int, type_slug: str) -> int:
        return conn.execute("""
            DELETE FROM relationship_edges
            WHERE from_member_id = ? AND to_member_id = ? AND type_slug = ?
        """, (from_member, to_member, type_slug)).rowcount

    def _fetch(self, conn, from_member: int, to_member: int, type_slug: str) -> Optional[RelationshipEdge]:
        row = conn.execute(f"""
            SELECT {_COLUMNS} FROM relationship_edges
            WHERE from_member_id = ? AND to_member_id = ? AND type_slug = ?
        """, (from_member, to_member, type_slug)).fetchone()
        return self._row_to_edge(row) if row else None

    def _row_to_edge(self, row) -> RelationshipEdge:
        """Convert database row to RelationshipEdge."""
        return RelationshipEdge(
            id=row["id"],
            tenant_id=row["tenant_id"],
            from_member_id=row["from_member_id"],
            to_member_id=row["to_member_id"],
            type_slug=row["type_slug"],
            created_at=row["created_at"],
        )
