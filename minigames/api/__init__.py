"""HTTP API: application factory, session manager, routes."""
