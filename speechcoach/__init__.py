"""SpeechCoach: record a spoken answer to a topic and get a rubric score back."""

__version__ = "0.1.0"
