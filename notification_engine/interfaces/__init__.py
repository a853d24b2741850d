"""Outer adapters exposing the notification engine."""
