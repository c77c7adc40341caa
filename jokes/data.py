"""
jokes/data.py -- The protected resource provider.

A fixed, read-only collection. The access gate decides who may read it;
this module only knows how to hand it out.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Joke:
    id: str
    joke: str


_JOKES: tuple[Joke, ...] = (
    Joke(
        id="0189hNRf2g",
        joke=(
            "I'm tired of following my dreams. "
            "I'm just going to ask them where they are going and meet up with them later."
        ),
    ),
    Joke(
        id="08EQZ8EQukb",
        joke="Did you hear about the guy whose whole left side was cut off? He's all right now.",
    ),
    Joke(
        id="08xHQCdx5Ed",
        joke="Why didn't the skeleton cross the road? Because he had no guts.",
    ),
)


class JokeProvider:
    def list_jokes(self) -> list[Joke]:
        """Return every joke, in a fixed order."""
        return list(_JOKES)
