"""Name linkage resolver: free-text person names to member records.

Deliberately strict. Matching is exact and case-sensitive after trimming
surrounding whitespace, and never partial, so two people who share a
first name are not mixed up.
"""

from typing import Iterable, Optional

from kinship.graph.errors import NotFound
from kinship.graph.member_store import MemberStore
from kinship.logging import get_logger
from kinship.models import Member

logger = get_logger(__name__)


class NameLinkageResolver:
    """Resolve a name within a tenant to a member."""

    def __init__(self, members: MemberStore):
        self.members = members
        # Tried in order; first hit wins
        self._matchers = [
            ("nickname", members.find_by_nickname),
            ("first_name", members.find_by_first_name),
            ("full_name", members.find_by_full_name),
        ]

    def find(self, tenant_id: int, name_text: str) -> Optional[Member]:
        """Matching member or None."""
        name = (name_text or "").strip()
        if not name:
            return None

        for field, matcher in self._matchers:
            member = matcher(tenant_id, name)
            if member is not None:
                logger.debug("name_resolved", tenant_id=tenant_id, name=name,
                             matched_on=field, member_id=member.id)
                return member
        return None

    def resolve(self, tenant_id: int, name_text: str) -> Member:
        """
        Resolve a name to a member.

        Order: nickname, then first name, then "first last".

        Raises:
            NotFound: nothing matches exactly
        """
        member = self.find(tenant_id, name_text)
        if member is None:
            raise NotFound(f"No member named '{name_text}' in tenant {tenant_id}")
        return member

    def resolve_ids(self, tenant_id: int, names: Iterable[str]) -> list[int]:
        """Member ids for the names that resolve, in input order, without repeats."""
        member_ids: list[int] = []
        unmatched = []
        for name in names:
            member = self.find(tenant_id, name)
            if member is None:
                unmatched.append(name)
            elif member.id not in member_ids:
                member_ids.append(member.id)
        if unmatched:
            logger.info("names_unmatched", tenant_id=tenant_id, names=unmatched)
        return member_ids
