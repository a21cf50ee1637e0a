"""Ingestion services (the write path)."""
