"""Clients for remote services the catalog depends on."""
