"""Exception hierarchy for loading the production export."""


class DashboardError(Exception):
    """Base class for dashboard failures surfaced to the user."""


class LoadError(DashboardError):
    """The export could not be fetched or read.

    Terminal for the session: there is no automatic retry.
    """


class DataFormatError(LoadError):
    """The export was read but its payload does not have the expected shape."""
