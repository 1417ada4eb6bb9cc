#!/usr/bin/env python3
"""
CamManager - Import Data Generator
Writes a bulk-import body (POST /api/cameras/import) for load testing
"""
import json
import random
from pathlib import Path

# Configuration
NUM_CAMERAS = 32
DUPLICATE_EVERY = 10  # every Nth row repeats an earlier IP and gets skipped
OUTPUT_FILE = Path(__file__).parent.parent / "cameras_import.json"

LOCATIONS = ["Ground Floor", "Floor 1", "Floor 2", "Outdoor"]
TYPES = ["Bullet", "Dome", "PTZ"]
STATUSES = ["Active", "Active", "Active", "Signal Lost", "Maintenance"]


def generate_rows():
    """Generate import rows in the camelCase shape spreadsheet exports use."""
    rows = []

    for i in range(1, NUM_CAMERAS + 1):
        # Distribute locations evenly (8 cameras per location)
        location = LOCATIONS[(i - 1) // 8 % len(LOCATIONS)]

        ip = f"192.168.50.{i}"
        if i % DUPLICATE_EVERY == 0:
            ip = rows[0]["ip"]

        rows.append({
            "name": f"Camera {i:02d}",
            "ip": ip,
            "recorderName": "",
            "location": location,
            "type": TYPES[(i - 1) % len(TYPES)],
            "status": random.choice(STATUSES),
            "installDate": f"2024-{random.randint(1, 12):02d}-{random.randint(1, 28):02d}",
        })

    return rows


def main():
    rows = generate_rows()

    with open(OUTPUT_FILE, 'w', encoding='utf-8') as f:
        json.dump({"rows": rows}, f, indent=2, ensure_ascii=False)

    duplicates = NUM_CAMERAS // DUPLICATE_EVERY
    print(f"✅ cameras_import.json written with {len(rows)} rows ({duplicates} duplicate IPs to be skipped)")
    print(f"\n📁 Location: {OUTPUT_FILE}")
    print(f"\n📊 Rows per location:")
    for location in LOCATIONS:
        count = len([r for r in rows if r['location'] == location])
        print(f"   • {location}: {count}")


if __name__ == "__main__":
    main()
