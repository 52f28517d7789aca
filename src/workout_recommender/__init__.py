"""Workout Recommender - daily strength training recommendations."""

__version__ = "0.1.0"
