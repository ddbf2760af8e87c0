"""Relationship taxonomy: seeded system types and the derived-query classification.

Both tables are versioned together. Adding a type that should take part in
a derived query means adding it to ``SYSTEM_TYPES`` *and* to
``CLASSIFICATION`` in the same change, then bumping ``TAXONOMY_VERSION``.

Direction: an edge (from, to, slug) reads "to is the <slug> of from", so
``CLASSIFICATION`` tags describe what the *target* of an outbound edge is
to the member the edge starts at.
"""

from enum import Enum
from typing import Optional

from kinship.graph.models import RelationshipType


TAXONOMY_VERSION = 2

CATEGORY_IMMEDIATE = "immediate"
CATEGORY_EXTENDED = "extended"
CATEGORY_NON_FAMILY = "non_family"

CATEGORIES = {
    CATEGORY_IMMEDIATE: "Immediate Family",
    CATEGORY_EXTENDED: "Extended Family",
    CATEGORY_NON_FAMILY: "Non-Family",
}


def _system(slug: str, label: str, category: str, inverse: Optional[str], sort_order: int) -> RelationshipType:
    return RelationshipType(
        slug=slug,
        label=label,
        category=category,
        inverse_slug=inverse,
        is_system=True,
        sort_order=sort_order,
        tenant_id=None,
    )


SYSTEM_TYPES: list[RelationshipType] = [
    # Generic types (version 1)
    _system("parent", "Parent", CATEGORY_IMMEDIATE, "child", 1),
    _system("child", "Child", CATEGORY_IMMEDIATE, "parent", 2),
    _system("spouse", "Spouse", CATEGORY_IMMEDIATE, "spouse", 3),
    _system("sibling", "Sibling", CATEGORY_IMMEDIATE, "sibling", 4),
    _system("partner", "Partner", CATEGORY_IMMEDIATE, "partner", 5),
    _system("grandparent", "Grandparent", CATEGORY_EXTENDED, "grandchild", 10),
    _system("grandchild", "Grandchild", CATEGORY_EXTENDED, "grandparent", 11),
    _system("aunt_uncle", "Aunt/Uncle", CATEGORY_EXTENDED, "niece_nephew", 12),
    _system("niece_nephew", "Niece/Nephew", CATEGORY_EXTENDED, "aunt_uncle", 13),
    _system("cousin", "Cousin", CATEGORY_EXTENDED, "cousin", 14),
    _system("in_law", "In-Law", CATEGORY_EXTENDED, "in_law", 15),
    _system("step_parent", "Step-Parent", CATEGORY_EXTENDED, "step_child", 16),
    _system("step_child", "Step-Child", CATEGORY_EXTENDED, "step_parent", 17),
    _system("step_sibling", "Step-Sibling", CATEGORY_EXTENDED, "step_sibling", 18),
    _system("half_sibling", "Half-Sibling", CATEGORY_EXTENDED, "half_sibling", 19),
    _system("ex_spouse", "Ex-Spouse", CATEGORY_EXTENDED, "ex_spouse", 20),
    _system("friend", "Friend", CATEGORY_NON_FAMILY, "friend", 30),
    _system("godparent", "Godparent", CATEGORY_NON_FAMILY, "godchild", 31),
    _system("godchild", "Godchild", CATEGORY_NON_FAMILY, "godparent", 32),

    # Specific types (version 2)
    _system("father", "Father", CATEGORY_IMMEDIATE, "child_of_father", 1),
    _system("mother", "Mother", CATEGORY_IMMEDIATE, "child_of_mother", 2),
    _system("child_of_father", "Child", CATEGORY_IMMEDIATE, "father", 3),
    _system("child_of_mother", "Child", CATEGORY_IMMEDIATE, "mother", 4),
    _system("brother", "Brother", CATEGORY_IMMEDIATE, "sibling_of_brother", 5),
    _system("sister", "Sister", CATEGORY_IMMEDIATE, "sibling_of_sister", 6),
    _system("sibling_of_brother", "Sibling", CATEGORY_IMMEDIATE, "brother", 7),
    _system("sibling_of_sister", "Sibling", CATEGORY_IMMEDIATE, "sister", 8),
    _system("husband", "Husband", CATEGORY_IMMEDIATE, "wife", 9),
    _system("wife", "Wife", CATEGORY_IMMEDIATE, "husband", 10),
    _system("stepfather", "Stepfather", CATEGORY_EXTENDED, "stepchild_of_father", 16),
    _system("stepmother", "Stepmother", CATEGORY_EXTENDED, "stepchild_of_mother", 17),
    _system("stepchild_of_father", "Stepchild", CATEGORY_EXTENDED, "stepfather", 18),
    _system("stepchild_of_mother", "Stepchild", CATEGORY_EXTENDED, "stepmother", 19),
    _system("grandfather", "Grandfather", CATEGORY_EXTENDED, "grandchild_of_gf", 21),
    _system("grandmother", "Grandmother", CATEGORY_EXTENDED, "grandchild_of_gm", 22),
    _system("grandchild_of_gf", "Grandchild", CATEGORY_EXTENDED, "grandfather", 23),
    _system("grandchild_of_gm", "Grandchild", CATEGORY_EXTENDED, "grandmother", 24),
    _system("uncle", "Uncle", CATEGORY_EXTENDED, "niece_nephew_of_uncle", 25),
    _system("aunt", "Aunt", CATEGORY_EXTENDED, "niece_nephew_of_aunt", 26),
    _system("niece_nephew_of_uncle", "Niece/Nephew", CATEGORY_EXTENDED, "uncle", 27),
    _system("niece_nephew_of_aunt", "Niece/Nephew", CATEGORY_EXTENDED, "aunt", 28),
]


class DerivedRelation(str, Enum):
    """Classification sets used by derived relation queries."""
    PARENT = "parent"
    CHILD = "child"
    STEP_PARENT = "step_parent"
    STEP_CHILD = "step_child"
    SPOUSE = "spouse"
    SIBLING = "sibling"
    GRANDPARENT = "grandparent"
    GRANDCHILD = "grandchild"


# What the inverse edge of a classified type must be classified as.
MIRROR = {
    DerivedRelation.PARENT: DerivedRelation.CHILD,
    DerivedRelation.CHILD: DerivedRelation.PARENT,
    DerivedRelation.STEP_PARENT: DerivedRelation.STEP_CHILD,
    DerivedRelation.STEP_CHILD: DerivedRelation.STEP_PARENT,
    DerivedRelation.SPOUSE: DerivedRelation.SPOUSE,
    DerivedRelation.SIBLING: DerivedRelation.SIBLING,
    DerivedRelation.GRANDPARENT: DerivedRelation.GRANDCHILD,
    DerivedRelation.GRANDCHILD: DerivedRelation.GRANDPARENT,
}

_SETS = {
    DerivedRelation.PARENT: ["father", "mother", "parent"],
    DerivedRelation.CHILD: ["child_of_father", "child_of_mother", "child"],
    DerivedRelation.STEP_PARENT: ["stepfather", "stepmother", "step_parent"],
    DerivedRelation.STEP_CHILD: ["stepchild_of_father", "stepchild_of_mother", "step_child"],
    DerivedRelation.SPOUSE: ["husband", "wife", "spouse"],
    DerivedRelation.SIBLING: ["brother", "sister", "sibling", "sibling_of_brother", "sibling_of_sister"],
    DerivedRelation.GRANDPARENT: ["grandfather", "grandmother", "grandparent"],
    DerivedRelation.GRANDCHILD: ["grandchild_of_gf", "grandchild_of_gm", "grandchild"],
}

CLASSIFICATION: dict[str, DerivedRelation] = {
    slug: relation for relation, slugs in _SETS.items() for slug in slugs
}

# Gendered accessors: types eligible for father()/mother() before the gender filter
FATHER_TYPES = frozenset({"father", "parent"})
MOTHER_TYPES = frozenset({"mother", "parent"})


def slugs_for(*relations: DerivedRelation) -> frozenset[str]:
    """All slugs classified under any of the given relations."""
    return frozenset(slug for relation in relations for slug in _SETS[relation])


def classify(slug: str) -> Optional[DerivedRelation]:
    """Classification tag for a slug, if it has one."""
    return CLASSIFICATION.get(slug)
