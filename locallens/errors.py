"""Domain exception types shared by the workflow, gateway and API layers."""


class LocalLensError(Exception):
    """Base class for LocalLens domain errors."""

    pass


class ValidationFailure(LocalLensError):
    """Request rejected before any network call."""

    pass


class StaleEditError(ValidationFailure):
    """Edit targets a day/activity position missing from the current copy."""

    pass


class GatewayError(LocalLensError):
    """AI gateway call failed or returned an unusable response."""

    pass


class PermissionDenied(LocalLensError):
    """Acting user does not own the resource."""

    pass


class NotFoundError(LocalLensError):
    """Requested record does not exist for this user."""

    pass
