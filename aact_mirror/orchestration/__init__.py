"""
Sync planning and per-type orchestration.

Decides which years to re-fetch, drops open-period records, and coordinates
fetch → extract → filter → persist for each archive type.
"""
