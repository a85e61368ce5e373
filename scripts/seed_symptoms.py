#!/usr/bin/env python3
"""
seed_symptoms.py — Populate MongoDB with sample symptom records for the body map.

Usage (from the repo root):
    python scripts/seed_symptoms.py                    # replace the demo user's symptoms
    python scripts/seed_symptoms.py --append           # add without clearing first
    python scripts/seed_symptoms.py --user-id alice --count 120

Prerequisites:
    • MONGO_URI env var set (or .env file present)
    • `pip install -e .`

Output is deterministic for a given --seed, so the heatmap a developer sees
locally matches the one in screenshots and bug reports.

What this script creates
────────────────────────
  symptoms  ← --count documents for --user-id, spread over the last 90 days:
              • ~60% on fine catalog regions with no coordinates (fallback spiral)
              • ~25% tapped on the map (body_coordinates at the region anchor)
              • ~10% on legacy coarse ids ("left_arm", "lower_back", ...)
              • ~5% with no severity (rendered as 5)
  indexes   ← (user_id, created_at desc) for the body-map snapshot query
"""

import argparse
import asyncio
import os
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from bodymap.services.region_catalog import PARENT_REGION_IDS, REGIONS  # noqa: E402

import certifi
from motor.motor_asyncio import AsyncIOMotorClient

MONGO_URI = os.environ.get("MONGO_URI", "")
MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "bodymap")
COLLECTION = os.environ.get("SYMPTOMS_COLLECTION", "symptoms")

if not MONGO_URI:
    print("ERROR: MONGO_URI not set. Add it to .env")
    sys.exit(1)

# ── Symptom vocabulary ────────────────────────────────────────────────────────

_TYPES = [
    "Aching", "Sharp pain", "Stiffness", "Numbness", "Tingling",
    "Swelling", "Burning", "Throbbing", "Cramping", "Tenderness",
]

# Hotspots are weighted so the heatmap shows a visible density gradient.
_HOTSPOTS = {
    "left_forearm": 6,
    "left_wrist": 4,
    "left_lower_back": 5,
    "spine_lumbar": 4,
    "forehead": 3,
    "right_knee": 3,
}


def _pick_region(rng: random.Random):
    ids = [r.id for r in REGIONS]
    weights = [_HOTSPOTS.get(rid, 1) for rid in ids]
    return rng.choices(REGIONS, weights=weights, k=1)[0]


def build_docs(user_id: str, count: int, seed: int) -> list[dict]:
    rng = random.Random(seed)
    now = datetime.now(tz=timezone.utc)
    docs = []
    for _ in range(count):
        region = _pick_region(rng)
        roll = rng.random()

        body_part = region.id
        coordinates = None
        if roll < 0.25:
            coordinates = {
                "x": round(region.anchor.x + rng.uniform(-3, 3), 1),
                "y": round(region.anchor.y + rng.uniform(-3, 3), 1),
                "view": region.view,
            }
        elif roll < 0.35:
            body_part = rng.choice(PARENT_REGION_IDS)

        severity = None if rng.random() < 0.05 else rng.randint(1, 10)

        docs.append({
            "user_id": user_id,
            "body_part": body_part,
            "body_coordinates": coordinates,
            "severity": severity,
            "symptom_type": rng.choice(_TYPES),
            "description": None,
            "created_at": now - timedelta(minutes=rng.randint(0, 90 * 24 * 60)),
        })
    return docs


async def main(args: argparse.Namespace) -> None:
    client = AsyncIOMotorClient(MONGO_URI, serverSelectionTimeoutMS=5000, tlsCAFile=certifi.where())
    collection = client[MONGO_DB_NAME][COLLECTION]

    try:
        if not args.append:
            deleted = await collection.delete_many({"user_id": args.user_id})
            print(f"Cleared {deleted.deleted_count} existing symptoms for {args.user_id}")

        docs = build_docs(args.user_id, args.count, args.seed)
        if docs:
            result = await collection.insert_many(docs)
            print(f"Inserted {len(result.inserted_ids)} symptoms into {MONGO_DB_NAME}.{COLLECTION}")
        else:
            print("Nothing to insert (--count 0)")

        await collection.create_index([("user_id", 1), ("created_at", -1)])
        print("Ensured index (user_id, created_at desc)")
    finally:
        client.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed body-map symptom data")
    parser.add_argument("--user-id", default="demo-user")
    parser.add_argument("--count", type=int, default=80)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--append", action="store_true", help="Keep existing symptoms")
    asyncio.run(main(parser.parse_args()))
