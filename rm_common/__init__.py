"""Control utilities for competition robots: filters, trajectories, LQR, limits and command senders."""

__version__ = "0.1.0"