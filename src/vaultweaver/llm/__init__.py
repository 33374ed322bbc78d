"""LLM client."""
