"""Graph ingestion, degree annotation, and side-by-side force layouts."""
