"""Persistence infrastructure (engine, sessions, repositories)."""
