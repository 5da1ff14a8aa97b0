"""
Exception types for the simulator.

Round rules never raise: a refused bet or cash-out is simply not accepted.
These cover the collaborators around the engine.
"""


class SkyhighError(Exception):
    """Base class for all simulator errors"""
    pass


# ============ Advisory ============

class AdvisoryError(SkyhighError):
    """The advisory provider failed or returned something unusable"""
    pass


class AdvisorUnavailable(AdvisoryError):
    """The advisory provider is not configured (missing key or client)"""
    def __init__(self, provider):
        self.provider = provider
        super().__init__(f"Advisor {provider} is not available")
