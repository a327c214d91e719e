"""Enrichment service package.

Resolves parsed ingredients to nutrition facts with bounded concurrency.
"""

from __future__ import annotations

from meal_generator.services.enrichment.fanout import EnrichmentFanout, is_failure_marker


__all__ = ["EnrichmentFanout", "is_failure_marker"]
