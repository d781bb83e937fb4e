"""Core data structures shared by the analyses."""
