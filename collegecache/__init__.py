"""
Incremental scraper and change-aware cache for AICTE approved colleges.

Each state's college listing is fetched, fingerprinted and, when it has
changed, re-parsed and enriched with per-college university data. Results
are kept in one JSON document per state.
"""
