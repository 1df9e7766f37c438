"""
Archive record types, YearFile I/O, and local sync state.

Handles reading and writing the per-(type, year) TSV metadata files and
enumerating which years are already mirrored on disk.
"""
