"""
Signed session tokens.

Tokens are stateless HS256 JWTs carrying the user id and role. There is no
revocation list, so logging out is a client-side concern.
"""
from datetime import timedelta

import jwt
from django.conf import settings
from django.utils import timezone

JWT_ALGORITHM = 'HS256'


def issue_token(user, expires_days=None):
    """Return an encoded token embedding {id, role} for ``user``."""
    now = timezone.now()
    days = expires_days if expires_days is not None else settings.JWT_EXPIRE_DAYS
    payload = {
        'id': user.id,
        'role': user.role,
        'iat': now,
        'exp': now + timedelta(days=days),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token):
    """Decode ``token``; raises ``jwt.InvalidTokenError`` (or a subclass) when it is bad."""
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[JWT_ALGORITHM])
