"""ReelTrack - personal movie and TV catalogue API"""

__version__ = "2.0.0"
