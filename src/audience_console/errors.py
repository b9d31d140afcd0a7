# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Error taxonomy for the audience console.

None of these are fatal: every operation catches them at its own boundary and
turns them into a user-visible, retryable state.
"""

from typing import Optional


class AudienceConsoleError(Exception):
    """Base class for all audience console errors."""


class ValidationError(AudienceConsoleError):
    """Invalid user input (empty query, missing budget, not connected).

    Raised before any network call is attempted.
    """


class UpstreamError(AudienceConsoleError):
    """Non-2xx or malformed response from an external API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class EmptyResultError(AudienceConsoleError):
    """A search returned nothing after filtering.

    Not a failure. Carries the guidance shown to the user.
    """

    def __init__(self, terms: list[str]):
        self.terms = terms
        self.guidance = empty_result_guidance(terms)
        super().__init__(self.guidance)


class GenerationError(AudienceConsoleError):
    """The text-generation collaborator returned empty or unparseable content."""


class AuthenticationError(AudienceConsoleError):
    """Login failed. The message is user-facing and the action can be retried."""


def empty_result_guidance(terms: list[str]) -> str:
    """Build the guidance message for a search with no results."""
    return (
        f'No results found for "{", ".join(terms)}". Try:\n'
        "  • Using more general terms\n"
        "  • Checking for spelling mistakes\n"
        "  • Removing some filters\n"
        "  • Trying related terms from the suggestions below"
    )
