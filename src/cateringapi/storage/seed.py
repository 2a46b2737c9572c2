"""Sample data for development databases."""

from __future__ import annotations

import logging

from cateringapi.storage.database import Database
from cateringapi.storage.repository import tag_key

log = logging.getLogger(__name__)

LOCATIONS = [
    ("Amsterdam", "Damrak 1", "1012AB", "NL", "+31-20-1234567"),
    ("Rotterdam", "Coolsingel 10", "3012AD", "NL", "+31-10-7654321"),
    ("The Hague", "Lange Voorhout 15", "2514EE", "NL", "+31-70-9876543"),
    ("Utrecht", "Domplein 4", "3512JC", "NL", "+31-30-4567890"),
    ("Eindhoven", "Strijp-S 20", "5617AB", "NL", "+31-40-1239876"),
    ("Groningen", "Grote Markt 5", "9712CP", "NL", "+31-50-6543210"),
    ("Maastricht", "Vrijthof 7", "6211LE", "NL", "+31-43-7890123"),
    ("Leiden", "Breestraat 50", "2311CS", "NL", "+31-71-2345678"),
    ("Delft", "Markt 80", "2611GW", "NL", "+31-15-3456789"),
    ("Haarlem", "Grote Houtstraat 100", "2011SN", "NL", "+31-23-5678901"),
]

# (name, index into LOCATIONS)
FACILITIES = [
    ("Amsterdam Grand Catering", 0),
    ("Rotterdam Event Center", 1),
    ("The Hague Banquet Hall", 2),
    ("Utrecht Party Venue", 3),
    ("Eindhoven Outdoor Events", 4),
    ("Groningen Conference Center", 5),
    ("Maastricht Wedding Hall", 6),
    ("Leiden Private Dining", 7),
    ("Delft Cultural Events", 8),
    ("Haarlem Exclusive Catering", 9),
]

TAGS = [
    "Wedding",
    "Corporate Event",
    "Birthday Party",
    "Outdoor",
    "Indoor",
    "Conference",
    "Private Party",
]

# (facility index, tag index)
FACILITY_TAGS = [
    (0, 0), (0, 3),
    (1, 1), (1, 4),
    (2, 5),
    (3, 2),
    (4, 3),
    (5, 5),
    (6, 0),
    (7, 6),
    (8, 3),
    (9, 4),
]

# (name, address, phone, email, facility indexes)
EMPLOYEES = [
    ("John Smith", "123 Main St, Amsterdam", "+31 6 1234 5678", "john.smith@example.com", (0,)),
    ("Emma Johnson", "456 Oak Ave, Rotterdam", "+31 6 2345 6789", "emma.johnson@example.com", (1,)),
    ("Michael Brown", "789 Pine Rd, Utrecht", "+31 6 3456 7890", "michael.brown@example.com", (3,)),
    ("Sophia Davis", "321 Elm St, The Hague", "+31 6 4567 8901", "sophia.davis@example.com", (2, 1)),
    ("Oliver Wilson", "654 Maple Dr, Eindhoven", "+31 6 5678 9012", "oliver.wilson@example.com", (4,)),
    ("Liam Anderson", "111 Beach Rd, Groningen", "+31 6 6789 0123", "liam.anderson@example.com", (5,)),
    ("Ava Martinez", "222 Hill St, Maastricht", "+31 6 7890 1234", "ava.martinez@example.com", (6,)),
    ("Noah Garcia", "333 Lake Ave, Leiden", "+31 6 8901 2345", "noah.garcia@example.com", (7,)),
    ("Isabella Rodriguez", "444 River Rd, Delft", "+31 6 9012 3456", "isabella.rodriguez@example.com", (8,)),
    ("James Wilson", "555 Forest Dr, Haarlem", "+31 6 0123 4567", "james.wilson@example.com", (9, 0)),
    ("Matthew Roberts", "130 Shore St, Amsterdam", "+31 6 6789 2345", "matthew.roberts@example.com", (0,)),
    ("Scarlett Turner", "140 Coast Dr, Rotterdam", "+31 6 7890 3456", "scarlett.turner@example.com", ()),
]


def has_data(db: Database) -> bool:
    return any(db.table_counts().values())


def seed(db: Database) -> dict[str, int]:
    """Insert the sample data set. Returns rows inserted per table."""
    conn = db.conn
    with db.transaction():
        location_ids = [
            conn.execute(
                """INSERT INTO locations
                   (city, address, zip_code, country_code, phone_number)
                   VALUES (?, ?, ?, ?, ?)""",
                loc,
            ).lastrowid
            for loc in LOCATIONS
        ]
        facility_ids = [
            conn.execute(
                "INSERT INTO facilities (name, location_id) VALUES (?, ?)",
                (name, location_ids[loc_idx]),
            ).lastrowid
            for name, loc_idx in FACILITIES
        ]
        tag_ids = [
            conn.execute(
                "INSERT INTO tags (name, name_key) VALUES (?, ?)", (name, tag_key(name))
            ).lastrowid
            for name in TAGS
        ]
        conn.executemany(
            "INSERT INTO facility_tags (facility_id, tag_id) VALUES (?, ?)",
            [(facility_ids[f], tag_ids[t]) for f, t in FACILITY_TAGS],
        )
        links = 0
        for name, address, phone, email, facilities in EMPLOYEES:
            employee_id = conn.execute(
                "INSERT INTO employees (name, address, phone, email) VALUES (?, ?, ?, ?)",
                (name, address, phone, email),
            ).lastrowid
            for f in facilities:
                conn.execute(
                    "INSERT INTO employee_facilities (employee_id, facility_id) VALUES (?, ?)",
                    (employee_id, facility_ids[f]),
                )
                links += 1

    counts = {
        "locations": len(LOCATIONS),
        "facilities": len(FACILITIES),
        "tags": len(TAGS),
        "facility_tags": len(FACILITY_TAGS),
        "employees": len(EMPLOYEES),
        "employee_facilities": links,
    }
    log.info(f"Seeded sample data: {counts}")
    return counts
