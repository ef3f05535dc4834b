"""apjedit - AGD project file toolkit."""

__version__ = '1.0.0'
