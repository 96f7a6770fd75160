# src/models/errors.py

"""Exception taxonomy shared by the updater and the dashboard reader."""


class GoldRatesError(Exception):
    """Base class for all gold_rates failures."""


class UpdateError(GoldRatesError):
    """A price update run could not complete."""


class GenerationError(UpdateError):
    """The text generation service failed (network, auth, timeout, empty reply)."""


class ParseError(UpdateError):
    """The generated text held no usable ``{gold22k, gold24k}`` object."""


class PersistError(UpdateError):
    """Writing the snapshot file failed."""


class PreviousStateError(GoldRatesError):
    """The existing snapshot is unreadable or corrupt."""


class LoadError(GoldRatesError):
    """The dashboard could not obtain or parse a snapshot."""
