"""Curated speaking prompts offered to the user, one per session."""

import random

TOPICS: tuple[str, ...] = (
    "The importance of renewable energy",
    "The impact of social media on society",
    "The future of artificial intelligence",
    "The benefits of learning a second language",
    "The effects of climate change on biodiversity",
)


def select_topic(rng: random.Random | None = None) -> str:
    """Pick a topic uniformly at random from ``TOPICS``."""
    return (rng or random).choice(TOPICS)
