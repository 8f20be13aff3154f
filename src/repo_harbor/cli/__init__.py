"""Command-line entry points for repo_harbor."""
