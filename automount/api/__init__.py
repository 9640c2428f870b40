"""Launcher-facing HTTP routers."""
