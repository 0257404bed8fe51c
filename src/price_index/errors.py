"""Error taxonomy for grounded price searches.

Every failure of a search is converted to one of these at the adapter
boundary, so the UI only ever handles `ServiceError`.
"""

BILLING_MESSAGE = "This live price indexing tool requires a valid billing account on your API key."
GENERIC_MESSAGE = "An error occurred while fetching live retail data."
NO_RESULT_MESSAGE = "Unable to index local store prices. Please try again."
MISSING_KEY_MESSAGE = "No API key is configured. Select an API project to continue."

# Substrings the service uses when the key's project or model is not recognized.
NOT_FOUND_MARKERS = ("Requested entity was not found", "404")


class ServiceError(Exception):
    """Base class for failed searches."""

    user_message: str = GENERIC_MESSAGE
    needs_credential: bool = False


class EmptyQueryError(ServiceError, ValueError):
    """Raised when a blank query reaches the adapter; no call is made."""

    user_message = "Enter a product name to search."


class NotFoundOrBillingError(ServiceError):
    """The service did not recognize the key's project or billing account.

    The user has to pick another credential; retrying as-is will not help.
    """

    user_message = BILLING_MESSAGE
    needs_credential = True


class MissingCredentialError(NotFoundOrBillingError):
    """No API key was configured at call time."""

    user_message = MISSING_KEY_MESSAGE


class GenericServiceError(ServiceError):
    """Any other failure of the grounding call, including timeouts."""

    user_message = GENERIC_MESSAGE


class NoResultError(GenericServiceError):
    """The call succeeded but returned nothing usable."""

    user_message = NO_RESULT_MESSAGE


def classify_error(exc: BaseException) -> ServiceError:
    """Map an arbitrary exception from the service call onto the taxonomy."""
    if isinstance(exc, ServiceError):
        return exc

    message = str(exc) or exc.__class__.__name__
    if any(marker in message for marker in NOT_FOUND_MARKERS):
        return NotFoundOrBillingError(message)
    return GenericServiceError(message)
