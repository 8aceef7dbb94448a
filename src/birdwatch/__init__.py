"""Birdwatch: bird species and sighting records with filtered, paged search."""
