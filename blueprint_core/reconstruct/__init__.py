"""Topology reconstruction and opening placement."""
