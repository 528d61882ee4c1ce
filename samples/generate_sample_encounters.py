#!/usr/bin/env python3
"""
Script to fill an encounter database with random sample encounters.

Usage:
    python generate_sample_encounters.py [database_file] [count]

Examples:
    python generate_sample_encounters.py                      # sample_encounters.db, 250 encounters
    python generate_sample_encounters.py my_logs.db 40        # my_logs.db, 40 encounters
"""

import random
import sys
import os
import time

from encounter_browser.core.classes import CLASS_NAMES
from encounter_browser.core.encounter_store import EncounterStore


BOSSES = [
    "Dark Mountain Predator",
    "Demon Beast Commander Valtan",
    "Covetous Devourer Vykas",
    "Saydon",
    "Kakul",
    "Brelshaza, Monarch of Nightmares",
    "Phantom Legion Commander Brelshaza",
    "Kaltaya, the Blooming Chaos",
    "Rakathus, the Lurking Arrogance",
    "Firehorn, Trampler of Earth",
]

PLAYER_NAMES = [
    "Aerith", "Bastion", "Corvina", "Dresk", "Elowen", "Faelan", "Grimsby",
    "Halvard", "Isolde", "Jorvik", "Kestrel", "Lysandra", "Morrow", "Nyx",
    "Oberon", "Perrin", "Quill", "Ravena", "Soren", "Thessaly",
]

PLAYABLE_CLASSES = [class_id for class_id in CLASS_NAMES if class_id % 100 != 1 and class_id != 0]


def generate_encounters(db_path: str, count: int = 250) -> None:
    """
    Insert random encounters, one every few minutes going back in time.

    Args:
        db_path: Database file to create or extend
        count: Number of encounters to add
    """
    store = EncounterStore(db_path)
    now_ms = int(time.time() * 1000)

    print(f"Generating {count} encounters into: {db_path}")

    fight_start = now_ms - count * 10 * 60 * 1000
    for i in range(count):
        party_size = random.choice([4, 8])
        names = random.sample(PLAYER_NAMES, party_size)
        participants = [(name, random.choice(PLAYABLE_CLASSES)) for name in names]
        duration = random.randint(15_000, 20 * 60 * 1000)

        store.insert_encounter(
            boss_name=random.choice(BOSSES),
            participants=participants,
            fight_start=fight_start,
            duration=duration,
            cleared=random.random() < 0.6,
            favorite=random.random() < 0.1,
        )
        fight_start += duration + random.randint(60_000, 15 * 60 * 1000)

        if (i + 1) % 50 == 0:
            print(f"Progress: {i + 1}/{count}")

    print()
    print(f"Total encounters in database: {store.get_total_count():,}")
    store.close()


def main():
    """Main entry point."""
    output_file = "sample_encounters.db"
    count = 250

    if len(sys.argv) >= 2:
        output_file = sys.argv[1]

    if len(sys.argv) >= 3:
        try:
            count = int(sys.argv[2])
        except ValueError:
            print(f"Invalid count '{sys.argv[2]}'. Using default {count}.")

    # Ensure output is in the samples directory if no path specified
    if not os.path.dirname(output_file):
        script_dir = os.path.dirname(os.path.abspath(__file__))
        output_file = os.path.join(script_dir, output_file)

    generate_encounters(output_file, count)


if __name__ == "__main__":
    main()
