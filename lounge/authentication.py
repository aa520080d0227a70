import logging

import jwt
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

from accounts.models import User
from .tokens import decode_token

logger = logging.getLogger(__name__)


class JWTAuthentication(BaseAuthentication):
    """
    Bearer token authentication using the Authorization header
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        header = get_authorization_header(request).split()

        if not header or header[0].lower() != self.keyword.lower().encode():
            return None

        if len(header) != 2:
            raise AuthenticationFailed('Invalid authorization header')

        try:
            payload = decode_token(header[1].decode())
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailed('Token expired')
        except (jwt.InvalidTokenError, UnicodeDecodeError):
            raise AuthenticationFailed('Token is not valid')

        user = User.objects.filter(id=payload.get('id'), is_active=True).first()
        if user is None:
            logger.warning("Token presented for missing or inactive user %s", payload.get('id'))
            raise AuthenticationFailed('Token is not valid')

        return (user, payload)

    def authenticate_header(self, request):
        # Makes DRF answer 401 rather than 403 when no token was sent
        return self.keyword
