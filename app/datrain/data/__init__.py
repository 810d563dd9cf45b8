"""Bundled data files for datrain."""
