"""CV portfolio: résumé extraction with an LLM and static portfolio publishing."""

__version__ = "0.1.0"
