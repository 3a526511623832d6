"""Exceptions raised by weighting schemes."""


class RankingError(ValueError):
    """Base class for errors raised by ranking_tfidf."""


class InvalidConfigurationError(RankingError):
    """A weighting scheme was constructed with an invalid configuration."""


class SerializationError(RankingError):
    """Serialized scheme parameters could not be decoded."""


__all__ = ["RankingError", "InvalidConfigurationError", "SerializationError"]
