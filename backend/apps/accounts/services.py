"""
Directory lookup - which organization a user belongs to.
"""

from apps.accounts.models import User


def get_organization_id_for_user(user_id: int | str) -> int | None:
    """
    Return the id of the organization owning ``user_id``.

    Unknown users, malformed ids and users without an organization all
    return None; callers decide whether that matters.
    """
    try:
        pk = int(user_id)
    except (TypeError, ValueError):
        return None

    return User.objects.filter(pk=pk).values_list("organization_id", flat=True).first()
