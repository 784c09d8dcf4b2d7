"""Configuration package for pgmfilter."""
