"""DocGrounder - TF-IDF retrieval of grounding context from local text files."""

__version__ = "0.1.0"
