"""Cafe management backend."""
