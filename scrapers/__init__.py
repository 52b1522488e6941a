"""Site scrapers and DOM heuristics."""
