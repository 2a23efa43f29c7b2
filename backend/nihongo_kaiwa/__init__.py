"""AI Nihongo Kaiwa: chat relay between a Japanese practice front end and OpenRouter."""

__version__ = "1.0.0"
