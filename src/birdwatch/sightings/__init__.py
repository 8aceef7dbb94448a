"""Sightings domain: timestamped observations of a bird at a location."""
