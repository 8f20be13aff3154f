"""HTTP server for repo_harbor."""
