"""
Demo data for development databases.

Everything is written through the ingestion service, so match result
points are computed by the scoring policy exactly as a real sync would.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from paddlerank.db.models import EquipmentType, TournamentTier
from paddlerank.services.ingestion import (
    create_equipment,
    create_player,
    create_tournament,
    record_match_result,
    start_equipment_usage,
)
from paddlerank.validation import EquipmentInput, PlayerInput, TournamentInput

logger = logging.getLogger(__name__)

SEED_SOURCE = "seed"

PADDLES = [
    {
        "name": "JOOLA Ben Johns Hyperion CFS 16",
        "slug": "joola-ben-johns-hyperion-cfs-16",
        "brand": "JOOLA",
        "description": "The signature paddle of Ben Johns, featuring Carbon Friction Surface technology.",
        "specs": {"weight": 8.2, "gripSize": 4.125, "length": 16.5, "width": 7.5,
                  "coreMaterial": "polymer", "surfaceMaterial": "carbon", "coreThickness": 16},
    },
    {
        "name": "Selkirk LUXX Control Air S2",
        "slug": "selkirk-luxx-control-air-s2",
        "brand": "Selkirk",
        "description": "Advanced paddle with control-focused design and air technology.",
        "specs": {"weight": 7.9, "gripSize": 4.25, "length": 16.4, "width": 7.4,
                  "coreMaterial": "polymer", "surfaceMaterial": "carbon", "coreThickness": 14},
    },
    {
        "name": "Franklin Ben Johns Signature",
        "slug": "franklin-ben-johns-signature",
        "brand": "Franklin",
        "description": "Former signature paddle featuring MaxGrit technology.",
        "specs": {"weight": 8.0, "gripSize": 4.125, "length": 16.5, "width": 7.5,
                  "coreMaterial": "polymer", "surfaceMaterial": "fiberglass", "coreThickness": 14},
    },
    {
        "name": "Paddletek Bantam EX-L Pro",
        "slug": "paddletek-bantam-ex-l-pro",
        "brand": "Paddletek",
        "description": "Professional-grade paddle with elongated design.",
        "specs": {"weight": 7.8, "gripSize": 4.25, "length": 16.5, "width": 7.375,
                  "coreMaterial": "polymer", "surfaceMaterial": "graphite", "coreThickness": 13},
    },
    {
        "name": "Engage Pursuit Pro MX",
        "slug": "engage-pursuit-pro-mx",
        "brand": "Engage",
        "description": "Power-focused paddle with maximum spin potential.",
        "specs": {"weight": 8.1, "gripSize": 4.125, "length": 16.5, "width": 7.5,
                  "coreMaterial": "polymer", "surfaceMaterial": "carbon", "coreThickness": 16},
    },
]

SHOES = [
    {
        "name": "K-Swiss Hypercourt Express 2",
        "slug": "k-swiss-hypercourt-express-2",
        "brand": "K-Swiss",
        "description": "Lightweight court shoe designed for quick lateral movement.",
        "specs": {"weight": 340, "dropHeight": 9, "courtType": "both"},
    },
    {
        "name": "ASICS Gel-Rocket 11",
        "slug": "asics-gel-rocket-11",
        "brand": "ASICS",
        "description": "Versatile court shoe with GEL cushioning technology.",
        "specs": {"weight": 320, "dropHeight": 10, "courtType": "indoor"},
    },
    {
        "name": "Nike Court Air Zoom Vapor Pro 2",
        "slug": "nike-court-air-zoom-vapor-pro-2",
        "brand": "Nike",
        "description": "Premium court shoe with responsive Zoom Air cushioning.",
        "specs": {"weight": 365, "dropHeight": 8, "courtType": "outdoor"},
    },
    {
        "name": "New Balance Fresh Foam LAV v2",
        "slug": "new-balance-fresh-foam-lav-v2",
        "brand": "New Balance",
        "description": "Court shoe with Fresh Foam midsole for comfort.",
        "specs": {"weight": 355, "dropHeight": 6, "courtType": "both"},
    },
]

PLAYERS = [
    {"name": "Ben Johns", "slug": "ben-johns", "ranking": 1, "country": "USA"},
    {"name": "Tyson McGuffin", "slug": "tyson-mcguffin", "ranking": 2, "country": "USA"},
    {"name": "JW Johnson", "slug": "jw-johnson", "ranking": 3, "country": "USA"},
    {"name": "Federico Staksrud", "slug": "federico-staksrud", "ranking": 4, "country": "Argentina"},
    {"name": "Anna Leigh Waters", "slug": "anna-leigh-waters", "ranking": 1, "country": "USA"},
    {"name": "Catherine Parenteau", "slug": "catherine-parenteau", "ranking": 2, "country": "Canada"},
]

# (player slug, equipment slug, start, end, verified, provenance)
USAGES = [
    ("ben-johns", "franklin-ben-johns-signature", datetime(2021, 1, 1), datetime(2023, 1, 1), True, "Official sponsor"),
    ("ben-johns", "joola-ben-johns-hyperion-cfs-16", datetime(2023, 1, 1), None, True, "Official sponsor"),
    ("ben-johns", "k-swiss-hypercourt-express-2", datetime(2023, 1, 1), None, True, "Tournament footage"),
    ("tyson-mcguffin", "selkirk-luxx-control-air-s2", datetime(2023, 6, 1), None, True, "Official sponsor"),
    ("tyson-mcguffin", "nike-court-air-zoom-vapor-pro-2", datetime(2023, 1, 1), None, False, "Tournament footage"),
    ("jw-johnson", "engage-pursuit-pro-mx", datetime(2024, 1, 1), None, True, "Official sponsor"),
    ("jw-johnson", "asics-gel-rocket-11", datetime(2024, 1, 1), None, False, None),
    ("federico-staksrud", "paddletek-bantam-ex-l-pro", datetime(2023, 3, 1), None, True, "Official sponsor"),
    ("anna-leigh-waters", "joola-ben-johns-hyperion-cfs-16", datetime(2023, 1, 1), None, True, "Official sponsor"),
    ("anna-leigh-waters", "new-balance-fresh-foam-lav-v2", datetime(2023, 1, 1), None, True, "Tournament footage"),
    ("catherine-parenteau", "selkirk-luxx-control-air-s2", datetime(2023, 9, 1), None, True, "Official sponsor"),
]

TOURNAMENTS = [
    {"name": "US Open Pickleball Championships 2024", "slug": "us-open-2024", "tier": TournamentTier.MAJOR,
     "start_date": datetime(2024, 4, 13), "end_date": datetime(2024, 4, 21), "location": "Naples, FL"},
    {"name": "PPA Masters 2024", "slug": "ppa-masters-2024", "tier": TournamentTier.PPA,
     "start_date": datetime(2024, 3, 7), "end_date": datetime(2024, 3, 10), "location": "Mesa, AZ"},
    {"name": "MLP Columbus 2024", "slug": "mlp-columbus-2024", "tier": TournamentTier.MLP,
     "start_date": datetime(2024, 6, 13), "end_date": datetime(2024, 6, 16), "location": "Columbus, OH"},
    {"name": "APP San Clemente Open 2024", "slug": "app-san-clemente-2024", "tier": TournamentTier.APP,
     "start_date": datetime(2024, 2, 15), "end_date": datetime(2024, 2, 18), "location": "San Clemente, CA"},
    {"name": "Beer City Open 2024", "slug": "beer-city-open-2024", "tier": TournamentTier.OTHER,
     "start_date": datetime(2024, 7, 18), "end_date": datetime(2024, 7, 21), "location": "Grand Rapids, MI"},
]

# (player slug, tournament slug, placement, match date, event)
RESULTS = [
    ("ben-johns", "us-open-2024", 1, datetime(2024, 4, 21), "Men's Singles"),
    ("tyson-mcguffin", "us-open-2024", 2, datetime(2024, 4, 21), "Men's Singles"),
    ("jw-johnson", "us-open-2024", 3, datetime(2024, 4, 21), "Men's Singles"),
    ("federico-staksrud", "us-open-2024", 4, datetime(2024, 4, 21), "Men's Singles"),
    ("anna-leigh-waters", "us-open-2024", 1, datetime(2024, 4, 21), "Women's Singles"),
    ("catherine-parenteau", "us-open-2024", 2, datetime(2024, 4, 21), "Women's Singles"),
    ("ben-johns", "ppa-masters-2024", 1, datetime(2024, 3, 10), "Men's Singles"),
    ("jw-johnson", "ppa-masters-2024", 2, datetime(2024, 3, 10), "Men's Singles"),
    ("anna-leigh-waters", "ppa-masters-2024", 1, datetime(2024, 3, 10), "Women's Singles"),
    ("tyson-mcguffin", "mlp-columbus-2024", 1, datetime(2024, 6, 16), "Team"),
    ("federico-staksrud", "mlp-columbus-2024", 2, datetime(2024, 6, 16), "Team"),
    ("jw-johnson", "app-san-clemente-2024", 1, datetime(2024, 2, 18), "Men's Singles"),
    ("catherine-parenteau", "app-san-clemente-2024", 1, datetime(2024, 2, 18), "Women's Singles"),
    ("federico-staksrud", "beer-city-open-2024", 1, datetime(2024, 7, 21), "Men's Singles"),
]


def seed_demo_data(session: Session) -> dict[str, int]:
    """
    Insert the demo catalogue, players, tournaments and results.

    Returns:
        Row counts per kind
    """
    equipment = {}
    for equipment_type, rows in ((EquipmentType.PADDLE, PADDLES), (EquipmentType.SHOE, SHOES)):
        for row in rows:
            item = create_equipment(session, EquipmentInput(type=equipment_type, **row))
            equipment[item.slug] = item

    players = {}
    for row in PLAYERS:
        player = create_player(session, PlayerInput(**row), source=SEED_SOURCE)
        players[player.slug] = player

    for player_slug, equipment_slug, start, end, verified, provenance in USAGES:
        start_equipment_usage(
            session,
            players[player_slug],
            equipment[equipment_slug],
            start,
            source=provenance,
            verified=verified,
            close_previous=False,
            end_date=end,
        )

    tournaments = {}
    for row in TOURNAMENTS:
        tournament = create_tournament(session, TournamentInput(**row))
        tournaments[tournament.slug] = tournament

    for player_slug, tournament_slug, placement, match_date, event_type in RESULTS:
        record_match_result(
            session,
            players[player_slug],
            tournaments[tournament_slug],
            placement,
            match_date,
            event_type,
        )

    session.flush()
    counts = {
        "paddles": len(PADDLES),
        "shoes": len(SHOES),
        "players": len(players),
        "usages": len(USAGES),
        "tournaments": len(tournaments),
        "match_results": len(RESULTS),
    }
    logger.info("Seeded demo data: %s", counts)
    return counts
