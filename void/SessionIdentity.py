# SessionIdentity.py
import random

IDENTITY_SPACE = 0xFFFFFF


class SessionError(Exception):
    """The cookie session could not be read or written."""


def identity_for(session):
    """
    Return (identity, fresh) for the client behind `session`.

    A new identity is drawn from [0, 0xFFFFFF) on first contact and kept in the
    client's signed cookie, so later requests from that client get the same one.
    """
    try:
        identity = session.get("id")
        if isinstance(identity, int):
            return identity, False

        identity = random.randrange(IDENTITY_SPACE)
        session["id"] = identity
        session.permanent = True
    except RuntimeError as e:
        # Flask hands out a NullSession when no SECRET_KEY is set
        raise SessionError(f"failed to get session: {e}") from e
    return identity, True


def colour_for(identity):
    return f"#{identity:06x}"
