from eventscale.integrations.directory.base import MemberContact, MemberDirectory
from eventscale.integrations.directory.native import SqlMemberDirectory

__all__ = [
    "MemberContact",
    "MemberDirectory",
    "SqlMemberDirectory",
]
