"""Video upload ingestion: buffering, probing, fast start rewrite, publishing."""
