"""Wellness Scores API - survey scores and goal tracking over HTTP."""
