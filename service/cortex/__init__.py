"""Cortex: personal CRM service."""
