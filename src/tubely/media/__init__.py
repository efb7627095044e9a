"""Media inspection, fast start rewriting and storage of processed videos."""
