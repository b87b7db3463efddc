"""Break project descriptions into LLM-generated coding tasks and keep them updated."""

__version__ = "0.1.0"
