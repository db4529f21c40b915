"""gh-backed services: worklists, batch details, stats and single-item lookups."""
