"""Command duration and exit status annotations for interactive shell prompts."""

__version__ = "0.1.0"
