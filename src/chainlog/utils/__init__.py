"""Helpers shared by chainlog modules."""
