"""SQLite store for family members.

Stands in for the application's member registry. The graph engine only
uses ``exists``/``tenant_of``/``gender`` and the exact-name finders.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional

from kinship.config import settings
from kinship.graph.storage import connect
from kinship.models import Gender, Member

_COLUMNS = "id, tenant_id, first_name, last_name, nickname, gender, is_living, birth_date, death_date, notes, created_at"


class MemberStore:
    """Store family members in SQLite."""

    def __init__(self, db_path: Optional[str] = None, timeout: Optional[float] = None):
        self.db_path = db_path or settings.database.graph_db_path
        self.timeout = timeout if timeout is not None else settings.database.busy_timeout
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Initialize database schema."""
        with connect(self.db_path, self.timeout) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS members (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    tenant_id INTEGER NOT NULL,
                    first_name TEXT NOT NULL,
                    last_name TEXT,
                    nickname TEXT,
                    gender TEXT DEFAULT 'unspecified',
                    is_living INTEGER DEFAULT 1,
                    birth_date TEXT,
                    death_date TEXT,
                    notes TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_member_first_name ON members(tenant_id, first_name)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_member_nickname ON members(tenant_id, nickname)")

    def add_member(self, member: Member) -> int:
        """Add a member and return their ID."""
        with connect(self.db_path, self.timeout) as conn:
            cursor = conn.execute("""
                INSERT INTO members (tenant_id, first_name, last_name, nickname, gender,
                                     is_living, birth_date, death_date, notes, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                member.tenant_id,
                member.first_name,
                member.last_name,
                member.nickname,
                member.gender.value,
                int(member.is_living),
                member.birth_date.isoformat() if member.birth_date else None,
                member.death_date.isoformat() if member.death_date else None,
                member.notes,
                member.created_at.isoformat(),
            ))
            return cursor.lastrowid

    def get_member(self, member_id: int) -> Optional[Member]:
        """Get member by ID."""
        with connect(self.db_path, self.timeout) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM members WHERE id = ?", (member_id,)
            ).fetchone()
            return self._row_to_member(row) if row else None

    def get_many(self, member_ids: Iterable[int]) -> dict[int, Member]:
        """Get several members keyed by ID; unknown IDs are left out."""
        ids = list(set(member_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM members WHERE id IN ({placeholders})", ids
            ).fetchall()
            return {row["id"]: self._row_to_member(row) for row in rows}

    def exists(self, tenant_id: int, member_id: int) -> bool:
        """True if the member exists within the tenant."""
        with connect(self.db_path, self.timeout) as conn:
            row = conn.execute(
                "SELECT 1 FROM members WHERE id = ? AND tenant_id = ?", (member_id, tenant_id)
            ).fetchone()
            return row is not None

    def tenant_of(self, member_id: int, conn=None) -> Optional[int]:
        """Tenant scope of a member, or None if unknown.

        Pass ``conn`` to read inside a caller's transaction.
        """
        if conn is None:
            with connect(self.db_path, self.timeout) as conn:
                return self.tenant_of(member_id, conn)
        row = conn.execute(
            "SELECT tenant_id FROM members WHERE id = ?", (member_id,)
        ).fetchone()
        return row["tenant_id"] if row else None

    def gender(self, member_id: int) -> Optional[Gender]:
        """Recorded gender of a member."""
        return self.genders([member_id]).get(member_id)

    def genders(self, member_ids: Iterable[int]) -> dict[int, Gender]:
        """Genders for several members at once."""
        ids = list(set(member_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(
                f"SELECT id, gender FROM members WHERE id IN ({placeholders})", ids
            ).fetchall()
            return {row["id"]: Gender(row["gender"] or Gender.UNSPECIFIED.value) for row in rows}

    def list_for_tenant(self, tenant_id: int) -> list[Member]:
        """All members of a tenant ordered by first name."""
        with connect(self.db_path, self.timeout) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM members WHERE tenant_id = ? ORDER BY first_name, id",
                (tenant_id,)
            ).fetchall()
            return [self._row_to_member(row) for row in rows]

    # Exact, case-sensitive lookups used by the name linkage resolver.

    def find_by_nickname(self, tenant_id: int, nickname: str) -> Optional[Member]:
        return self._find_one(tenant_id, "nickname = ?", nickname)

    def find_by_first_name(self, tenant_id: int, first_name: str) -> Optional[Member]:
        return self._find_one(tenant_id, "first_name = ?", first_name)

    def find_by_full_name(self, tenant_id: int, full_name: str) -> Optional[Member]:
        return self._find_one(tenant_id, "first_name || ' ' || COALESCE(last_name, '') = ?", full_name)

    def _find_one(self, tenant_id: int, condition: str, value: str) -> Optional[Member]:
        with connect(self.db_path, self.timeout) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM members WHERE tenant_id = ? AND {condition} ORDER BY id LIMIT 1",
                (tenant_id, value)
            ).fetchone()
            return self._row_to_member(row) if row else None

    def update_member(self, member_id: int, **kwargs) -> bool:
        """Update member attributes."""
        allowed = {"first_name", "last_name", "nickname", "gender", "is_living",
                   "birth_date", "death_date", "notes"}
        updates = {k: v for k, v in kwargs.items() if k in allowed}

        if not updates:
            return False

        current = self.get_member(member_id)
        if current is None:
            return False
        # Re-validate the merged record (date ordering, gender enum)
        merged = Member(**{**current.model_dump(), **updates})

        row = {k: getattr(merged, k) for k in updates}
        if "gender" in row:
            row["gender"] = row["gender"].value
        if "is_living" in row:
            row["is_living"] = int(row["is_living"])
        for key in ("birth_date", "death_date"):
            if key in row and row[key]:
                row[key] = row[key].isoformat()

        set_clause = ", ".join(f"{k} = ?" for k in row.keys())
        values = list(row.values()) + [member_id]

        with connect(self.db_path, self.timeout) as conn:
            cursor = conn.execute(
                f"UPDATE members SET {set_clause} WHERE id = ?", values
            )
            return cursor.rowcount > 0

    def delete_member(self, member_id: int, conn=None) -> bool:
        """Delete a member by ID."""
        if conn is None:
            with connect(self.db_path, self.timeout) as conn:
                return self.delete_member(member_id, conn)
        cursor = conn.execute("DELETE FROM members WHERE id = ?", (member_id,))
        return cursor.rowcount > 0

    def _row_to_member(self, row) -> Member:
        """Convert database row to Member model."""
        return Member(
            id=row["id"],
            tenant_id=row["tenant_id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            nickname=row["nickname"],
            gender=Gender(row["gender"] or Gender.UNSPECIFIED.value),
            is_living=bool(row["is_living"]),
            birth_date=date.fromisoformat(row["birth_date"]) if row["birth_date"] else None,
            death_date=date.fromisoformat(row["death_date"]) if row["death_date"] else None,
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else datetime.now(),
        )
