"""Notification fan-out and delivery service for managed buildings."""
