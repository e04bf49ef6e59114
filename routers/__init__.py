"""HTTP routers for the analysis API."""
