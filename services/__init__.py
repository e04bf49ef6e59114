"""Services for LLM analysis, persistence and the analysis pipeline."""
