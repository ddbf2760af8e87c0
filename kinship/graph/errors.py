"""Errors raised by the relationship graph.

All of these are caller-correctable input errors. Storage failures are
not wrapped; ``sqlite3`` errors propagate unchanged.
"""

from typing import Optional


class KinshipError(Exception):
    """Base class for graph errors."""


class NotFound(KinshipError):
    """A requested record does not exist."""


class UnknownType(NotFound):
    """Relationship type slug is not in the registry (or not visible)."""

    def __init__(self, slug: str, tenant_id: Optional[int] = None):
        self.slug = slug
        self.tenant_id = tenant_id
        scope = f" for tenant {tenant_id}" if tenant_id is not None else ""
        super().__init__(f"Unknown relationship type '{slug}'{scope}")


class MemberNotFound(NotFound):
    """Member id is unknown to the member registry."""

    def __init__(self, member_id: int):
        self.member_id = member_id
        super().__init__(f"Member {member_id} not found")


class DuplicateSlug(KinshipError):
    """Slug already used by a global or tenant type."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Relationship type '{slug}' already exists")


class InvalidInverse(KinshipError):
    """Inverse slug does not resolve, or does not point back."""

    def __init__(self, slug: str, inverse_slug: str, reason: str = "does not exist"):
        self.slug = slug
        self.inverse_slug = inverse_slug
        super().__init__(f"Invalid inverse '{inverse_slug}' for '{slug}': {reason}")


class SelfEdge(KinshipError):
    """Both ends of an edge are the same member."""

    def __init__(self, member_id: int):
        self.member_id = member_id
        super().__init__(f"Member {member_id} cannot be related to itself")


class CrossTenantEdge(KinshipError):
    """Edge endpoints belong to different tenants."""

    def __init__(self, member_a: int, tenant_a: int, member_b: int, tenant_b: int):
        self.member_a = member_a
        self.member_b = member_b
        self.tenant_a = tenant_a
        self.tenant_b = tenant_b
        super().__init__(
            f"Members {member_a} (tenant {tenant_a}) and {member_b} "
            f"(tenant {tenant_b}) are in different tenants"
        )


class TypeInUse(KinshipError):
    """Type cannot be removed while something still references it."""

    def __init__(self, slug: str, reason: str):
        self.slug = slug
        super().__init__(f"Relationship type '{slug}' is in use: {reason}")


class ProtectedType(KinshipError):
    """System and global types cannot be removed by a tenant."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Relationship type '{slug}' is system-defined")
