"""HTTP API for the Residence Ballot service."""
