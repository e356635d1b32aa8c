"""Operational scripts for the Sense database."""
