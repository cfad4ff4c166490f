class TrustCheckError(Exception):
    """Base error for the trust scoring engine."""


class InvalidRequestError(TrustCheckError, ValueError):
    """The request cannot be scored as given."""


class InvalidDomainError(InvalidRequestError):
    """Input could not be turned into a domain name."""


class SourceError(TrustCheckError):
    """An external data source (reputation feed, WHOIS, TLS probe...) failed."""


class StoreError(TrustCheckError):
    """A backing record store could not be read or written."""
