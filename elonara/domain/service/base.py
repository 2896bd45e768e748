"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold logic that spans several entities (an invitation,
    its event or community, and the roster) and own the transaction
    boundaries of the operations they expose.
    """

    pass
