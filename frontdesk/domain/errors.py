"""
Domain errors
All subclass ValueError so routers map them to HTTP 400 like any other validation failure
"""


class FrontDeskError(ValueError):
    """Base class for front-desk domain errors"""


class CheckoutValidationError(FrontDeskError):
    """User-correctable checkout input problem (collector, bank reference, gas weight)"""


class GasWeightError(CheckoutValidationError):
    """Final gas weight exceeds the weight recorded at check-in"""
