"""Domain-specific exceptions

Business failures of a financing attempt (no financier, short term, rate
ceiling) are invoice statuses, not exceptions. The exceptions below signal
programming or data errors.
"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidEntityError(DomainException):
    """Entity was constructed with values outside its allowed range"""

    pass


class DuplicateRateConfigurationError(DomainException):
    """Financier has more than one rate configuration for the same issuer"""

    def __init__(self, financier_name: str, issuer_id: int):
        self.financier_name = financier_name
        self.issuer_id = issuer_id
        super().__init__(
            f"Financier {financier_name!r} has more than one rate configuration for issuer {issuer_id}"
        )


class DuplicateNameError(DomainException):
    """Two entities of the same kind share a name"""

    pass


class InvoiceAlreadyProcessedError(DomainException):
    """Outcome applied to an invoice that is no longer NON_FINANCED"""

    pass


class InvoiceNotFoundError(DomainException):
    """Requested invoice does not exist"""

    pass
