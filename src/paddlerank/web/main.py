"""
JSON API for PaddleRank.

Thin layer over the read queries and leaderboards. Computed leaderboards
and tournament listings are cached per app in a CacheGroup; the sync
endpoint invalidates them by tag.

Run with:
    uvicorn paddlerank.web.main:app
"""

import asyncio
import hmac
import logging
from typing import Any, Callable, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from paddlerank.affiliates import best_affiliate_link
from paddlerank.config import settings
from paddlerank.db import queries
from paddlerank.db.models import Equipment, EquipmentType, Player, Tournament, utcnow
from paddlerank.db.session import get_db, new_session
from paddlerank.equipment.specs import specs_for
from paddlerank.scoring.points import get_placement_label
from paddlerank.stats.cache import CacheGroup, TTLCache
from paddlerank.stats.leaderboard import (
    get_equipment_leaderboard,
    get_leaderboards,
    get_player_leaderboard,
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


def get_session_factory() -> SessionFactory:
    """Dependency: factory for sessions used outside the request thread."""
    return new_session


def _build_caches() -> CacheGroup:
    ttl = settings.leaderboard_cache_ttl_seconds
    caches = CacheGroup()
    caches.add(TTLCache("equipment-leaderboard", ttl, {"leaderboard", "equipment"}))
    caches.add(TTLCache("player-leaderboard", ttl, {"leaderboard", "players"}))
    caches.add(TTLCache("all-leaderboards", ttl, {"leaderboard", "equipment", "players"}))
    caches.add(TTLCache("all-tournaments", ttl, {"tournaments"}))
    return caches


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# =============================================================================
# Serializers
# =============================================================================

def _player_summary(player: Player) -> dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "slug": player.slug,
        "ranking": player.ranking,
        "country": player.country,
        "image_url": player.image_url,
    }


def _equipment_summary(equipment: Equipment) -> dict[str, Any]:
    return {
        "id": equipment.id,
        "name": equipment.name,
        "slug": equipment.slug,
        "brand": equipment.brand,
        "type": equipment.type.value,
        "image_url": equipment.image_url,
    }


def _tournament_summary(tournament: Tournament) -> dict[str, Any]:
    return {
        "id": tournament.id,
        "name": tournament.name,
        "slug": tournament.slug,
        "tier": tournament.tier.value,
        "start_date": tournament.start_date,
        "end_date": tournament.end_date,
        "location": tournament.location,
    }


def _player_detail(player: Player) -> dict[str, Any]:
    results = sorted(player.match_results, key=lambda r: r.match_date, reverse=True)
    usages = sorted(player.equipment_usages, key=lambda u: u.start_date, reverse=True)
    return {
        **_player_summary(player),
        "match_results": [
            {
                "tournament": _tournament_summary(result.tournament),
                "placement": result.placement,
                "placement_label": get_placement_label(result.placement),
                "points": result.points,
                "match_date": result.match_date,
                "event_type": result.event_type,
            }
            for result in results[:20]
        ],
        "equipment_usages": [
            {
                "equipment": _equipment_summary(usage.equipment),
                "start_date": usage.start_date,
                "end_date": usage.end_date,
                "verified": usage.verified,
                "source": usage.source,
            }
            for usage in usages
        ],
    }


def _equipment_detail(equipment: Equipment) -> dict[str, Any]:
    specs = specs_for(equipment)
    link = best_affiliate_link(equipment.affiliate_links)
    return {
        **_equipment_summary(equipment),
        "description": equipment.description,
        "specs": specs.model_dump() if specs is not None else None,
        "active_players": [_player_summary(usage.player) for usage in equipment.usages],
        "buy_link": {"retailer": link.retailer.value, "url": link.url} if link else None,
    }


# =============================================================================
# App
# =============================================================================

def create_app() -> FastAPI:
    app = FastAPI(title="PaddleRank")
    caches = _build_caches()
    app.state.caches = caches

    @app.get("/api/leaderboard")
    async def leaderboard(
        type: Optional[str] = None,
        limit: int = Query(default=settings.leaderboard_default_limit, ge=1),
        session_factory: SessionFactory = Depends(get_session_factory),
    ):
        limit = min(limit, settings.leaderboard_max_limit)
        kind = (type or "").upper()

        def player_board():
            with session_factory() as session:
                return get_player_leaderboard(session, limit)

        def equipment_board(equipment_type: str):
            with session_factory() as session:
                return get_equipment_leaderboard(session, equipment_type, limit)

        try:
            if kind == "PLAYER":
                players = await asyncio.to_thread(
                    caches.get("player-leaderboard").get_or_compute, (limit,), player_board
                )
                return {"players": [p.to_dict() for p in players]}

            if kind in (EquipmentType.PADDLE.value, EquipmentType.SHOE.value):
                rows = await asyncio.to_thread(
                    caches.get("equipment-leaderboard").get_or_compute,
                    (kind, limit),
                    lambda: equipment_board(kind),
                )
                return {"equipment": [e.to_dict() for e in rows]}

            all_cache = caches.get("all-leaderboards")
            hit, boards = all_cache.get((limit,))
            if not hit:
                boards = await get_leaderboards(session_factory, limit)
                all_cache.set((limit,), boards)
            return {name: [row.to_dict() for row in rows] for name, rows in boards.items()}
        except Exception:
            logger.exception("Leaderboard API error")
            return _error(500, "Failed to fetch leaderboard")

    @app.get("/api/players")
    def players(slug: Optional[str] = None, db: Session = Depends(get_db)):
        try:
            if slug:
                player = queries.get_player_by_slug(db, slug)
                if player is None:
                    return _error(404, "Player not found")
                return {"player": _player_detail(player)}
            return {"players": [_player_summary(p) for p in queries.list_players(db)]}
        except Exception:
            logger.exception("Players API error")
            return _error(500, "Failed to fetch players")

    @app.get("/api/equipment")
    def equipment(
        type: Optional[str] = None,
        slug: Optional[str] = None,
        db: Session = Depends(get_db),
    ):
        try:
            if slug:
                item = queries.get_equipment_by_slug(db, slug)
                if item is None:
                    return _error(404, "Equipment not found")
                return {"equipment": _equipment_detail(item)}

            equipment_type = None
            if type:
                try:
                    equipment_type = EquipmentType(type.upper())
                except ValueError:
                    return _error(400, f"Unknown equipment type '{type}'")
            items = queries.list_equipment(db, equipment_type)
            return {"equipment": [_equipment_summary(e) for e in items]}
        except Exception:
            logger.exception("Equipment API error")
            return _error(500, "Failed to fetch equipment")

    @app.get("/api/tournaments")
    def tournaments(
        slug: Optional[str] = None,
        limit: int = Query(default=50, ge=1),
        db: Session = Depends(get_db),
    ):
        try:
            if slug:
                tournament = queries.get_tournament_by_slug(db, slug)
                if tournament is None:
                    return _error(404, "Tournament not found")
                results = sorted(tournament.match_results, key=lambda r: r.placement)
                return {
                    "tournament": {
                        **_tournament_summary(tournament),
                        "results": [
                            {
                                "player": _player_summary(result.player),
                                "placement": result.placement,
                                "placement_label": get_placement_label(result.placement),
                                "points": result.points,
                                "event_type": result.event_type,
                            }
                            for result in results
                        ],
                    }
                }

            limit = min(limit, settings.leaderboard_max_limit)
            rows = caches.get("all-tournaments").get_or_compute(
                (limit,),
                lambda: [
                    {**_tournament_summary(t), "result_count": count}
                    for t, count in queries.recent_tournaments(db, limit)
                ],
            )
            return {"tournaments": rows}
        except Exception:
            logger.exception("Tournaments API error")
            return _error(500, "Failed to fetch tournaments")

    @app.post("/api/sync/tournaments")
    def trigger_sync(request: Request):
        denied = _check_cron_auth(request)
        if denied is not None:
            return denied

        sources = configured_sources()
        for tag in ("tournaments", "leaderboard"):
            caches.invalidate_tag(tag)

        return {
            "message": "Tournament sync endpoint ready",
            "timestamp": utcnow().isoformat(),
            "status": "pending_api_integration",
            "configured_sources": sources,
            "sync_enabled": bool(sources),
        }

    @app.get("/api/sync/tournaments")
    def sync_status(request: Request, db: Session = Depends(get_db)):
        denied = _check_cron_auth(request)
        if denied is not None:
            return denied

        try:
            return {
                "message": "Cron sync check complete",
                "timestamp": utcnow().isoformat(),
                "current_tournaments": queries.count_tournaments(db),
                "next_sync_ready": bool(configured_sources()),
            }
        except Exception:
            logger.exception("Tournament cron sync error")
            return _error(500, "Cron sync failed")

    return app


def configured_sources() -> list[str]:
    """Data sources with credentials present in settings."""
    sources = []
    if settings.apt_api_key:
        sources.append("AllPickleballTournaments")
    if settings.ppa_api_token:
        sources.append("PPA Tour")
    return sources


def _check_cron_auth(request: Request) -> Optional[JSONResponse]:
    """None when the bearer token matches cron_secret, else the error response."""
    if not settings.cron_secret:
        return _error(500, "CRON_SECRET not configured")

    header = request.headers.get("authorization", "")
    expected = f"Bearer {settings.cron_secret}"
    if not hmac.compare_digest(header.encode("utf-8"), expected.encode("utf-8")):
        return _error(401, "Unauthorized")
    return None


app = create_app()
