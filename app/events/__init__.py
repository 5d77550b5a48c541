"""Booking domain events and their publication."""
