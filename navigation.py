"""
Client view state for the form / login / admin screens.

The admin screen is guarded: asking for it while unauthorized lands on the
login screen instead. Status tabs are filtered here, on the full list the
API returns. Nothing on the server calls into this module; it models the
browser client that consumes the API and has no route of its own.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Mapping, Union

from schemas import Status, Submission


class View(str, Enum):
    FORM = "form"
    LOGIN = "login"
    ADMIN = "admin"


@dataclass(frozen=True)
class AppState:
    view: View = View.FORM
    authorized: bool = False


def navigate(state: AppState, target: View) -> AppState:
    if target == View.ADMIN and not state.authorized:
        return replace(state, view=View.LOGIN)
    return replace(state, view=target)


def login(state: AppState, authorized: bool) -> AppState:
    """Apply a login result. Success always opens the admin screen."""
    if not authorized:
        return replace(state, view=View.LOGIN, authorized=False)
    return AppState(view=View.ADMIN, authorized=True)


def filter_by_status(
    submissions: Iterable[Union[Submission, Mapping]], status: Status
) -> List[Union[Submission, Mapping]]:
    # Serialized records may lack a status; those are still in the inbox.
    def status_of(item):
        if isinstance(item, Submission):
            return item.status
        return Status(item.get("status") or Status.NEW.value)

    return [item for item in submissions if status_of(item) == status]
