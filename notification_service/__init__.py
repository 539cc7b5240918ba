"""Notification fan-out and auction email service."""
