"""Pure domain helpers (statuses, aggregation, access policy)."""
