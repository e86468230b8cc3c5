"""Exceptions raised while provisioning the RGW gateway."""


class RGWOperatorError(Exception):
    """Base class for all gateway operator errors."""

    pass


class PreconditionError(RGWOperatorError):
    """Raised when the cluster membership is missing or has no monitors."""

    pass


class AdminConnectionError(RGWOperatorError):
    """Raised when the Ceph administrative session cannot be opened or used."""

    pass


class ProvisioningError(RGWOperatorError):
    """
    Raised when a provisioning step fails.

    The ``step`` attribute names the resource that could not be ensured
    (``keyring``, ``service`` or ``deployment``). The underlying error is
    available on ``__cause__``.
    """

    step = "unknown"

    def __init__(self, message: str, step: str | None = None):
        if step is not None:
            self.step = step
        super().__init__(f"{self.step}: {message}")


class CredentialError(ProvisioningError):
    """Raised when the gateway keyring secret cannot be ensured."""

    step = "keyring"


class ExposureError(ProvisioningError):
    """Raised when the gateway service cannot be ensured."""

    step = "service"


class WorkloadError(ProvisioningError):
    """Raised when the gateway deployment cannot be ensured."""

    step = "deployment"
