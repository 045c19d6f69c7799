"""Server-side services: transcription, evaluation, and the analysis pipeline."""
