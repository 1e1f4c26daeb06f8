"""
Pacer App - Interval Workout Plan Engine

Ingests treadmill interval workout plans from two JSON schemas, normalizes
them into a canonical plan, and drives a live workout session that maps
elapsed time to the active and upcoming interval while emitting
change, warning and completion events.
"""

__version__ = "0.1.0"
__author__ = "Pacer Team"
