"""Family graph package."""
from kinship.graph.family.edges import RelationshipEdgeStore
from kinship.graph.family.queries import DerivedRelationQueries
from kinship.graph.family.resolver import NameLinkageResolver
from kinship.graph.family.graph import FamilyGraph

__all__ = ["RelationshipEdgeStore", "DerivedRelationQueries", "NameLinkageResolver", "FamilyGraph"]
