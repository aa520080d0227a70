import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from lounge.exceptions import StateConflict
from .models import User
from .roles import permissions_for_role

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = 'User with this email or username already exists'


def create_user(*, name, username, email, password, phone, role):
    """Create a user with the default permission bundle of ``role``."""
    if User.objects.filter(Q(email=email) | Q(username=username)).exists():
        raise StateConflict(DUPLICATE_USER_MESSAGE)

    user = User(
        name=name,
        username=username,
        email=email,
        phone=phone,
        role=role,
        permissions=permissions_for_role(role),
    )
    user.set_password(password)
    try:
        with transaction.atomic():
            user.save()
    except IntegrityError:
        # lost a race against a concurrent registration
        raise StateConflict(DUPLICATE_USER_MESSAGE)
    logger.info("Created %s user %s", role, username)
    return user
