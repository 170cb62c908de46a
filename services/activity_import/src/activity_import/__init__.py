"""Batch import of exported Strava activities."""
