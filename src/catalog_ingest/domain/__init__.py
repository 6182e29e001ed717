"""Domain layer: catalog entries, ports and the ingestion pipeline."""
