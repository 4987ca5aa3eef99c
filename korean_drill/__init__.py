"""korean-drill: spaced repetition drills for Korean study."""

__version__ = "1.0.0"
