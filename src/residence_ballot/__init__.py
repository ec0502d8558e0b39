"""Residence Ballot: apartment-community voting with weighted result tallies."""

__version__ = "0.1.0"
