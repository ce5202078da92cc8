"""LLM integration layer.

This package is intentionally small:
- No prompt/output logging.
- Configurable via environment variables.
- Treated as a stateless function by callers; no retries.
"""
