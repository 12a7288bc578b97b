"""In-memory recommendation request events and their aggregation."""
