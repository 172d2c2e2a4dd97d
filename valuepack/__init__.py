"""Structured values diff and change-set pipeline."""
