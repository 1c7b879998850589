"""HTTP API for the bonding curve token."""
