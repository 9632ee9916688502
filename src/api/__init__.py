"""HTTP API for Lemon Learn."""
