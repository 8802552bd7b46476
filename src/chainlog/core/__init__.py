"""Core chainlog modules."""
