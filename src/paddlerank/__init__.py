"""
PaddleRank - Pro Pickleball Equipment Analytics

Tracks which paddles and shoes professional players use and credits the
tournament points they earn to the gear in use on the day.

Main components:
- scoring: Placement/tier points policy
- sync: Multi-source conflict resolution and feed collection
- sources: Data source adapter contract and retry helper
- stats: Equipment and player leaderboards
- services: Ingestion (write path)
- web: FastAPI JSON API
"""

__version__ = "0.1.0"
