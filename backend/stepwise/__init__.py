"""Stepwise backend: goal breakdown scheduling and activity analytics."""
