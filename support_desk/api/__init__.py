"""HTTP API: routers and dependency wiring."""
