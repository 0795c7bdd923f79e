"""Statement ingestion: node models, adapters and source helpers."""
