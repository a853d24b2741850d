"""Notification delivery and preference engine."""
