"""Runnable demonstrations of processes, scheduling, persistence, threads, synchronisation and UDP."""

__version__ = "0.1.0"