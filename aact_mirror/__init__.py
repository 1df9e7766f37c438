"""
aact_mirror – incremental mirror of AACT snapshot catalog metadata.

Scrapes the monthly archive listings published for each archive type
(pgdump, flatfiles), works out which years still need fetching, and keeps
one tab-separated metadata file per (type, year) under metadata/export-monthly/.
"""

__version__ = "0.1.0"
