"""Member Resources - Fines and Loan History

Resources:
- library://members/with-fines - Members carrying a fine balance
- library://members/{member_id}/loans - Every loan of one member, oldest first
"""

import logging
from typing import Any

from fastmcp.exceptions import ResourceError

from ..library import get_library
from ..tools.circulation import loan_data

logger = logging.getLogger(__name__)


async def members_with_fines_handler() -> dict[str, Any]:
    """Returns members whose fine balance is above zero."""
    try:
        members = get_library().members_with_fines()
        return {
            "members": [member.model_dump(mode="json") for member in members],
            "total": len(members),
        }
    except Exception as e:
        logger.exception("Error in members/with-fines resource")
        raise ResourceError(f"Failed to retrieve members with fines: {e!s}") from e


async def member_loans_handler(member_id: str) -> dict[str, Any]:
    """Returns the loan history of one member.

    Unknown member numbers give an empty history, not an error.
    """
    try:
        parsed_id = int(member_id)
    except ValueError as e:
        raise ResourceError(f"Invalid member id: {member_id}") from e

    try:
        library = get_library()
        today = library.today()
        loans = library.loans_for_member(parsed_id)
        logger.debug("MCP Resource Request - members/%d/loans: %d loans", parsed_id, len(loans))
        return {
            "member_id": parsed_id,
            "loans": [loan_data(loan, today) for loan in loans],
            "total": len(loans),
        }
    except Exception as e:
        logger.exception("Error in members/{member_id}/loans resource")
        raise ResourceError(f"Failed to retrieve loans: {e!s}") from e


member_resources: list[dict[str, Any]] = [
    {
        "uri": "library://members/with-fines",
        "name": "Members With Fines",
        "description": "Members carrying an unpaid fine balance",
        "mime_type": "application/json",
        "handler": members_with_fines_handler,
    },
    {
        "uri_template": "library://members/{member_id}/loans",
        "name": "Member Loans",
        "description": "All loans of a member in the order they were made",
        "mime_type": "application/json",
        "handler": member_loans_handler,
    },
]
