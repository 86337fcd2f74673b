"""HTTP surface for ABC Retailers: health, readiness and the dashboard."""
