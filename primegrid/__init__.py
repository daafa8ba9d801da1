"""Distributed prime search over TCP: a range-dispatching server and searching clients."""

__version__ = "0.1.0"