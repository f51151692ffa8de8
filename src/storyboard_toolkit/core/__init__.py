"""Core data models shared by the transform and pipeline packages."""
