"""Routery API: units, items, simulation."""
