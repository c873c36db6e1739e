"""Surf quality scoring for LA County coastline points."""
