# EpisodArr Application
__version__ = "0.1.0"
