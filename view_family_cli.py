"""Command-line family viewer - works without web server."""

import sys

from kinship.config import settings
from kinship.graph import FamilyGraph
from kinship.graph.taxonomy import CATEGORIES
from kinship.logging import configure_logging


def main():
    tenant_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1

    print("=" * 80)
    print(f"👨‍👩‍👧‍👦 KINSHIP GRAPH - Tenant {tenant_id}")
    print("=" * 80)

    configure_logging(settings.logging.level)
    graph = FamilyGraph()

    members = graph.list_members(tenant_id)
    relationships = graph.relationships_for_tenant(tenant_id)

    print(f"\n📊 Statistics:")
    print(f"   👤 {len(members)} Members")
    print(f"   🔗 {len(relationships)} Relationships")

    for member in members:
        print(f"\n{'=' * 80}")
        print(f"👤 {member.display_name}")
        if member.nickname:
            print(f"   Full name: {member.full_name}")
        print(f"   Gender: {member.gender.value}")
        if member.birth_date:
            print(f"   Born: {member.birth_date.isoformat()}")
        if member.death_date:
            print(f"   Died: {member.death_date.isoformat()}")
        if member.age is not None:
            print(f"   Age: {member.age}")

        tree = graph.family_tree(member.id)
        for section in ("parents", "spouses", "siblings", "children", "grandparents", "grandchildren", "other"):
            entries = tree[section]
            if entries:
                names = ", ".join(f"{e['member'].display_name} ({e['type_slug']})" for e in entries)
                print(f"   {section.replace('_', ' ').title()}: {names}")

    if relationships:
        print(f"\n{'=' * 80}")
        print("🔗 Relationships:")
        for rel in relationships:
            print(f"   • {rel['description']}")

    print(f"\n{'=' * 80}")
    print("🏷️  Relationship types:")
    for category, types in graph.grouped_types(tenant_id).items():
        labels = ", ".join(t["label"] for t in types)
        print(f"   {CATEGORIES[category]}: {labels}")

    print(f"\n{'=' * 80}")
    print("✅ Done!")
    print()


if __name__ == "__main__":
    main()
