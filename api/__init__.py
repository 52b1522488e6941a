"""HTTP API for the body-odds scraper."""
