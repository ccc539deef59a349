"""Sock inventory business logic."""
