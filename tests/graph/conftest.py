"""Pytest fixtures for graph tests."""

import tempfile

import pytest

from kinship.graph.family.edges import RelationshipEdgeStore
from kinship.graph.family.graph import FamilyGraph
from kinship.graph.family.queries import DerivedRelationQueries
from kinship.graph.family.resolver import NameLinkageResolver
from kinship.graph.member_store import MemberStore
from kinship.graph.type_registry import RelationshipTypeRegistry
from kinship.models import Gender, Member


@pytest.fixture
def db_path():
    """Graph database in a throwaway directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield f"{tmpdir}/kinship.db"


@pytest.fixture
def members(db_path):
    """Member store."""
    return MemberStore(db_path=db_path)


@pytest.fixture
def registry(db_path):
    """Relationship type registry with system types seeded."""
    return RelationshipTypeRegistry(db_path=db_path)


@pytest.fixture
def edges(registry, members, db_path):
    """Edge store sharing the registry's database."""
    return RelationshipEdgeStore(registry, members, db_path=db_path)


@pytest.fixture
def queries(edges, members, registry):
    """Derived relation queries."""
    return DerivedRelationQueries(edges, members, registry)


@pytest.fixture
def resolver(members):
    """Name linkage resolver."""
    return NameLinkageResolver(members)


@pytest.fixture
def graph(db_path):
    """FamilyGraph instance."""
    return FamilyGraph(db_path)


@pytest.fixture
def add_member(members):
    """Factory adding a member to tenant 1 (by default) and returning its id."""
    def _add(first_name, gender=Gender.UNSPECIFIED, tenant_id=1, **kwargs):
        return members.add_member(
            Member(tenant_id=tenant_id, first_name=first_name, gender=gender, **kwargs)
        )
    return _add
