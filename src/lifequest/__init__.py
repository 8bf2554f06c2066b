"""LifeQuest: gamified self-tracking for study, sport, goals and habits."""

__version__ = "0.1.0"
