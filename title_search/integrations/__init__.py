"""
External system integrations (TMDb, OMDb, etc.).

New metadata search providers should live under this namespace so they remain
decoupled from app entrypoints (`api/`) and command-line scripts (`scripts/`).
"""
