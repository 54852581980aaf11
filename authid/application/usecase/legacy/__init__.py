"""Legacy flat-user use cases.

Kept for callers written against the flat user shape. They are routed
through the identifier table in virtual mode and refused in direct mode.
"""

from .get_user_by_email import GetUserByEmailRequest, GetUserByEmailUseCase
from .link_account import LinkAccountRequest, LinkAccountResponse, LinkAccountUseCase
from .list_users import ListUsersRequest, ListUsersResponse, ListUsersUseCase
from .sign_in_email import SignInEmailRequest, SignInEmailUseCase
from .sign_up_email import SignUpEmailRequest, SignUpEmailUseCase
from .update_user import UpdateUserRequest, UpdateUserResponse, UpdateUserUseCase

__all__ = [
    "GetUserByEmailRequest",
    "GetUserByEmailUseCase",
    "LinkAccountRequest",
    "LinkAccountResponse",
    "LinkAccountUseCase",
    "ListUsersRequest",
    "ListUsersResponse",
    "ListUsersUseCase",
    "SignInEmailRequest",
    "SignInEmailUseCase",
    "SignUpEmailRequest",
    "SignUpEmailUseCase",
    "UpdateUserRequest",
    "UpdateUserResponse",
    "UpdateUserUseCase",
]
