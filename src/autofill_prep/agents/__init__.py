"""Pipeline stages: fetch, extract, resolve, compose, generate."""
