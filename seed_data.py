"""
Seed script for the kinship graph - populates the database with a sample family.

This script:
1. Removes the existing graph database
2. Creates a three-generation family for tenant 1:
   - Paternal and maternal grandparents
   - Father and mother
   - Three children, one married with a child of their own
   - A stepfather, an uncle and a cousin

Edges read "B is the <type> of A" for link(A, B, type).

Run this script to start with a clean slate:
    python seed_data.py
"""

from datetime import date
from pathlib import Path

from kinship.config import settings
from kinship.graph import FamilyGraph
from kinship.logging import configure_logging
from kinship.models import Gender, Member

TENANT_ID = 1


def clear_database(db_path: str):
    """Remove the graph database files to start fresh."""
    print("=" * 80)
    print("CLEARING DATABASE")
    print("=" * 80)

    for suffix in ("", "-wal", "-shm"):
        path = Path(db_path + suffix)
        if path.exists():
            path.unlink()
            print(f"✅ Deleted: {path}")

    print("\n✅ Database cleared!\n")


def person(first_name: str, last_name: str, gender: Gender, born: date, **kwargs) -> Member:
    return Member(tenant_id=TENANT_ID, first_name=first_name, last_name=last_name,
                  gender=gender, birth_date=born, **kwargs)


def seed_sample_family(graph: FamilyGraph) -> dict[str, Member]:
    """Create the sample family and its relationships."""
    print("=" * 80)
    print("SEEDING SAMPLE FAMILY")
    print("=" * 80)

    m = {}
    m["grandpa_joe"] = graph.add_member(person("Joseph", "Walker", Gender.MALE, date(1938, 3, 2),
                                               is_living=False, death_date=date(2015, 9, 30)))
    m["grandma_rose"] = graph.add_member(person("Rose", "Walker", Gender.FEMALE, date(1940, 6, 14)))
    m["grandpa_ed"] = graph.add_member(person("Edward", "Hughes", Gender.MALE, date(1941, 1, 20)))
    m["grandma_ann"] = graph.add_member(person("Ann", "Hughes", Gender.FEMALE, date(1943, 11, 5),
                                               nickname="Nana"))
    m["father"] = graph.add_member(person("David", "Walker", Gender.MALE, date(1965, 4, 11)))
    m["mother"] = graph.add_member(person("Karla", "Walker", Gender.FEMALE, date(1967, 8, 23)))
    m["uncle"] = graph.add_member(person("Peter", "Walker", Gender.MALE, date(1962, 2, 17)))
    m["cousin"] = graph.add_member(person("Liam", "Walker", Gender.MALE, date(1992, 7, 1)))
    m["stepfather"] = graph.add_member(person("Marcus", "Reid", Gender.MALE, date(1963, 12, 9)))

    children = [
        graph.add_member(person("Emma", "Walker", Gender.FEMALE, date(1990, 5, 3), nickname="Em")),
        graph.add_member(person("Noah", "Walker", Gender.MALE, date(1993, 10, 19))),
        graph.add_member(person("Mia", "Walker", Gender.FEMALE, date(1997, 1, 28))),
    ]
    m["son_in_law"] = graph.add_member(person("Oliver", "Grant", Gender.MALE, date(1989, 9, 9)))
    m["grandchild"] = graph.add_member(person("Lucy", "Grant", Gender.FEMALE, date(2018, 3, 15)))

    # Couples
    graph.link(m["grandma_rose"].id, m["grandpa_joe"].id, "husband")
    graph.link(m["grandma_ann"].id, m["grandpa_ed"].id, "husband")
    graph.link(m["mother"].id, m["father"].id, "husband")

    # Parents' own parents
    graph.link(m["father"].id, m["grandpa_joe"].id, "father")
    graph.link(m["father"].id, m["grandma_rose"].id, "mother")
    graph.link(m["uncle"].id, m["grandpa_joe"].id, "father")
    graph.link(m["uncle"].id, m["grandma_rose"].id, "mother")
    graph.link(m["mother"].id, m["grandpa_ed"].id, "father")
    graph.link(m["mother"].id, m["grandma_ann"].id, "mother")
    graph.link(m["father"].id, m["uncle"].id, "brother")
    graph.link(m["cousin"].id, m["uncle"].id, "father")

    for child in children:
        graph.link(child.id, m["father"].id, "father")
        graph.link(child.id, m["mother"].id, "mother")
        graph.link(child.id, m["grandpa_joe"].id, "grandfather")
        graph.link(child.id, m["grandma_rose"].id, "grandmother")
        graph.link(child.id, m["grandpa_ed"].id, "grandfather")
        graph.link(child.id, m["grandma_ann"].id, "grandmother")
        graph.link(child.id, m["uncle"].id, "uncle")
        graph.link(child.id, m["cousin"].id, "cousin")
        graph.link(child.id, m["stepfather"].id, "stepfather")

    for i, child in enumerate(children):
        for other in children[i + 1:]:
            graph.link(child.id, other.id, "sibling")

    # Emma's own family
    emma = children[0]
    graph.link(emma.id, m["son_in_law"].id, "husband")
    graph.link(m["grandchild"].id, m["son_in_law"].id, "father")
    graph.link(m["grandchild"].id, emma.id, "mother")

    for key, member in m.items():
        print(f"✅ {key}: {member.display_name} (id={member.id})")
    for child in children:
        print(f"✅ child: {child.display_name} (id={child.id})")

    pairs = graph.edges.pairs_for_tenant(TENANT_ID)
    print(f"\n✅ {len(pairs)} relationship pairs created")
    return m


def main():
    configure_logging(settings.logging.level)
    db_path = settings.database.graph_db_path
    clear_database(db_path)
    settings.database.ensure_dirs()
    graph = FamilyGraph(db_path)
    seed_sample_family(graph)

    orphans = graph.edges.verify_pairing(TENANT_ID)
    print(f"{'✅' if not orphans else '❌'} Pairing check: {len(orphans)} orphaned edge(s)")


if __name__ == "__main__":
    main()
