"""Exception types raised by the rating engine and its data model."""


class RatingsError(Exception):
    """Base class for rating engine errors."""


class InvalidGameError(RatingsError, ValueError):
    """A game record cannot be built from the given players and scores."""


class InvariantViolation(RatingsError, ValueError):
    """A game rating does not carry one snapshot per player slot."""
