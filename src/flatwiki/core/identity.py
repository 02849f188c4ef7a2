"""Requester identity forwarded by an upstream proxy."""

import logging
from collections.abc import Mapping

from pydantic import ValidationError

from flatwiki.core.models import Account

logger = logging.getLogger(__name__)


def parse_identity(headers: Mapping[str, str], header: str) -> Account | None:
    """Decode the account carried in a request header.

    A missing header is an anonymous request. A header that does not decode
    to an account object is treated the same way: the request goes on as
    anonymous and the failure is only logged.

    Header values arrive latin-1 decoded (as ASGI servers deliver them); the
    original bytes are recovered and parsed as UTF-8 JSON.
    """
    raw = headers.get(header, "")
    if not raw:
        logger.debug("No %s header, anonymous request", header)
        return None

    try:
        account = Account.model_validate_json(raw.encode("latin-1"))
    except (UnicodeEncodeError, ValidationError) as e:
        logger.debug("Ignoring undecodable %s header: %s", header, e)
        return None

    logger.debug("Request from account %s", account.username or account.full_name)
    return account
