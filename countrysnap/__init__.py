"""
CountrySnap - Guess the country from its outline.

A pass-and-play geography game for one shared screen. The engine provides:
- Round and turn state management
- Fuzzy judging of typed guesses
- Camera framing for the target outline
- A persistent leaderboard
"""

__version__ = "0.1.0"
