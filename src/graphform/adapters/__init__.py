"""Adapters connecting the domain ports to the outside world."""
