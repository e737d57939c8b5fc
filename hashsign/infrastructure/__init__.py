"""Infrastructure layer for HashSign: adapters, stubs and observability."""
