#!/usr/bin/env python3
"""
Sample data import script for the Open Congress graph
"""

import asyncio
import os
import sys

# Add the project root to the Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from congress_api.lib.graph import GraphClient, Statement

# Sample data
SAMPLE_CONGRESSES = [
    {
        "id": "congress-19",
        "congress_number": 19,
        "congress_website_key": 19,
        "name": "19th Congress of the Philippines",
        "ordinal": "19th",
        "start_date": "2022-07-25",
        "end_date": "2025-06-30",
        "start_year": 2022,
        "end_year": 2025,
        "year_range": "2022-2025",
    },
    {
        "id": "congress-20",
        "congress_number": 20,
        "congress_website_key": 20,
        "name": "20th Congress of the Philippines",
        "ordinal": "20th",
        "start_date": "2025-07-28",
        "end_date": "2028-06-30",
        "start_year": 2025,
        "end_year": 2028,
        "year_range": "2025-2028",
    },
]

SAMPLE_PEOPLE = [
    {
        "id": "person-dela-cruz",
        "first_name": "Juan",
        "last_name": "Dela Cruz",
        "middle_name": "Santos",
        "full_name": "Juan Santos Dela Cruz",
        "aliases": ["JUAN DELA CRUZ", "DELA CRUZ, JUAN S."],
        "chambers": [(19, "senate"), (20, "senate")],
    },
    {
        "id": "person-reyes",
        "first_name": "Maria",
        "last_name": "Reyes",
        "middle_name": "Lopez",
        "full_name": "Maria Lopez Reyes",
        "aliases": ["REYES, MARIA L."],
        "chambers": [(19, "house"), (20, "senate")],
    },
    {
        "id": "person-santos",
        "first_name": "Jose",
        "last_name": "Santos",
        "middle_name": None,
        "full_name": "Jose Santos",
        "aliases": [],
        "chambers": [(20, "house")],
    },
]

SAMPLE_COMMITTEES = [
    {"id": "committee-19-finance", "name": "Finance", "type": "standing", "congress": 19},
    {"id": "committee-20-finance", "name": "Finance", "type": "standing", "congress": 20},
    {"id": "committee-20-health", "name": "Health and Demography", "type": "standing", "congress": 20},
]

SAMPLE_BILLS = [
    {
        "id": "bill-19-hb-1",
        "subtype": "HB",
        "name": "HB00001",
        "bill_number": 1,
        "congress": 19,
        "title": "Tax Relief for Small Enterprises Act",
        "congress_website_abstract": "Lowers income tax rates for micro and small enterprises.",
        "date_filed": "2022-07-01",
        "scope": "National",
        "authors": ["person-reyes"],
    },
    {
        "id": "bill-19-sb-12",
        "subtype": "SB",
        "name": "SBN-12",
        "bill_number": 12,
        "congress": 19,
        "title": "Rural Health Access Act",
        "congress_website_abstract": "Establishes barangay health stations in every municipality.",
        "date_filed": "2022-07-05",
        "scope": "National",
        "authors": ["person-dela-cruz"],
    },
    {
        "id": "bill-20-sb-3",
        "subtype": "SB",
        "name": "SBN-3",
        "bill_number": 3,
        "congress": 20,
        "title": "Digital Public Records Act",
        "congress_website_abstract": "Requires online publication of public records.",
        "date_filed": "2025-07-30",
        "scope": "National",
        "authors": ["person-dela-cruz", "person-reyes"],
    },
    {
        "id": "bill-20-hb-7",
        "subtype": "HB",
        "name": "HB00007",
        "bill_number": 7,
        "congress": 20,
        "title": "Cebu City Road Widening Act",
        "congress_website_abstract": None,
        "date_filed": None,
        "scope": "Local",
        "authors": ["person-santos"],
    },
]

MERGE_CONGRESS = """
MERGE (c:Congress {id: $id})
SET c += $props
"""

MERGE_CHAMBER = """
MATCH (c:Congress {congress_number: $congress})
MERGE (g:Group {id: $id})
SET g.name = $name, g.type = 'chamber', g.subtype = $subtype, g.congress = $congress
MERGE (g)-[:BELONGS_TO]->(c)
"""

MERGE_PERSON = """
MERGE (p:Person {id: $id})
SET p += $props
"""

MERGE_MEMBERSHIP = """
MATCH (p:Person {id: $person_id})
MATCH (g:Group {id: $group_id})
MERGE (p)-[m:MEMBER_OF]->(g)
SET m.type = 'member'
"""

MERGE_COMMITTEE = """
MATCH (c:Congress {congress_number: $congress})
MERGE (com:Committee {id: $id})
SET com.name = $name, com.type = $type
MERGE (com)-[:BELONGS_TO]->(c)
"""

MERGE_BILL = """
MATCH (c:Congress {congress_number: $congress})
MERGE (d:Document {id: $id})
SET d += $props, d.type = 'bill'
MERGE (d)-[:FILED_IN]->(c)
"""

MERGE_AUTHORSHIP = """
MATCH (p:Person {id: $person_id})
MATCH (d:Document {id: $document_id})
MERGE (p)-[:AUTHORED]->(d)
"""

CHAMBER_NAMES = {"senate": "Senate", "house": "House of Representatives"}


def chamber_id(congress: int, subtype: str) -> str:
    return f"chamber-{congress}-{subtype}"


class SampleDataImporter:
    def __init__(self, graph=None):
        self.graph = graph or GraphClient()
        self.statements_run = 0

    async def _run(self, query: str, **params):
        await self.graph.execute(Statement(query, params))
        self.statements_run += 1

    async def import_congresses(self):
        """Import congresses and their two chambers"""
        print("🏛️  Importing congresses...")
        for congress in SAMPLE_CONGRESSES:
            props = {key: value for key, value in congress.items() if key != "id"}
            await self._run(MERGE_CONGRESS, id=congress["id"], props=props)
            for subtype, name in CHAMBER_NAMES.items():
                await self._run(
                    MERGE_CHAMBER,
                    id=chamber_id(congress["congress_number"], subtype),
                    name=f"{congress['ordinal']} Congress {name}",
                    subtype=subtype,
                    congress=congress["congress_number"],
                )
            print(f"   ✅ Created congress: {congress['name']}")

    async def import_people(self):
        """Import people and their chamber memberships"""
        print("📋 Importing people...")
        for person in SAMPLE_PEOPLE:
            props = {key: value for key, value in person.items() if key not in ("id", "chambers")}
            await self._run(MERGE_PERSON, id=person["id"], props=props)
            for congress, subtype in person["chambers"]:
                await self._run(MERGE_MEMBERSHIP, person_id=person["id"], group_id=chamber_id(congress, subtype))
            print(f"   ✅ Created person: {person['full_name']}")

    async def import_committees(self):
        """Import committees"""
        print("🗂️  Importing committees...")
        for committee in SAMPLE_COMMITTEES:
            await self._run(MERGE_COMMITTEE, **committee)
        print(f"   ✅ Created {len(SAMPLE_COMMITTEES)} committees")

    async def import_bills(self):
        """Import bills and their authors"""
        print("📜 Importing bills...")
        for bill in SAMPLE_BILLS:
            props = {key: value for key, value in bill.items() if key not in ("id", "authors")}
            await self._run(MERGE_BILL, id=bill["id"], congress=bill["congress"], props=props)
            for person_id in bill["authors"]:
                await self._run(MERGE_AUTHORSHIP, person_id=person_id, document_id=bill["id"])
            print(f"   ✅ Created bill: {bill['name']}")

    async def run_import(self):
        """Run the complete import process"""
        print("🚀 Starting sample data import...")

        try:
            await self.import_congresses()
            await self.import_people()
            await self.import_committees()
            await self.import_bills()

            print("\n✅ Sample data import completed successfully!")
            print(f"   📊 Imported:")
            print(f"      • {len(SAMPLE_CONGRESSES)} congresses")
            print(f"      • {len(SAMPLE_PEOPLE)} people")
            print(f"      • {len(SAMPLE_COMMITTEES)} committees")
            print(f"      • {len(SAMPLE_BILLS)} bills")

        except Exception as e:
            print(f"\n❌ Import failed: {e}")
            raise
        finally:
            await self.graph.close()


if __name__ == "__main__":
    importer = SampleDataImporter()
    asyncio.run(importer.run_import())
