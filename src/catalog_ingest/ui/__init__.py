"""Command line interface for catalog ingestion."""
