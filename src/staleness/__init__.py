"""Stale issue and pull request triage for a single GitHub repository.

The entry point lives in :mod:`src.staleness.runner`; it is not re-exported here
because :mod:`src.tracker.client` imports this package's models.
"""
