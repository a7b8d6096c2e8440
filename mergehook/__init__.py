"""Merge-request webhook receiver that runs per-repository shell scripts."""
