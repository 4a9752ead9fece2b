"""Real-time voice relay between browser clients and the OpenAI Realtime API."""

__version__ = "1.0.0"
