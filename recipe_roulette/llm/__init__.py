"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Pass free-form cooking questions to a Groq chat model.
- Surface failures as a generic internal error.
"""
