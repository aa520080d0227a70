import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiExample

from lounge.exceptions import InvalidCredentials, StateConflict
from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from lounge.tokens import issue_token
from .models import User
from .serializers import (
    LoginSerializer, PermissionsUpdateSerializer, RegisterSerializer,
    StaffCreateSerializer, UserSerializer,
)
from .services import create_user

logger = logging.getLogger(__name__)

PUBLIC_USER_FIELDS = ('id', 'name', 'username', 'email', 'phone', 'role')


def public_user(user, with_permissions=False):
    data = {field: getattr(user, field) for field in PUBLIC_USER_FIELDS}
    if with_permissions:
        data['permissions'] = user.permissions
    return data


class RegisterView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Register a user",
        description="Create an account; the permission bundle is assigned from the role",
        request=RegisterSerializer,
        examples=[
            OpenApiExample(
                'Register Example',
                value={'name': 'Asha Rao', 'username': 'asha', 'email': 'asha@example.com',
                       'password': 'secret', 'phone': '9800000000', 'role': 'Staff'}
            )
        ]
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = create_user(**serializer.validated_data)
        return success_response(
            {'user': public_user(user), 'token': issue_token(user)},
            message='User registered successfully',
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(summary="Log in", request=LoginSerializer)
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = User.objects.filter(email=data['email'], role=data['role'], is_active=True).first()
        if user is None:
            raise InvalidCredentials('Invalid credentials or role')
        if not user.check_password(data['password']):
            logger.warning("Failed login for %s", data['email'])
            raise InvalidCredentials('Invalid credentials')

        user.last_login = timezone.now()
        user.save(update_fields=['last_login', 'updated_at'])
        logger.info("User %s logged in as %s", user.username, user.role)

        return success_response(
            {'user': public_user(user, with_permissions=True), 'token': issue_token(user)},
            message='Login successful',
        )


class MeView(APIView):
    @extend_schema(summary="Current user", responses={200: UserSerializer})
    def get(self, request):
        return success_response({'user': UserSerializer(request.user).data})


class LogoutView(APIView):
    @extend_schema(summary="Log out", description="Tokens are stateless; the client discards its token")
    def post(self, request):
        return success_response(message='Logged out successfully')


class StaffListView(APIView):
    required_roles = {'GET': ('Admin',), 'POST': ('Admin',)}

    @extend_schema(summary="List staff members", responses={200: UserSerializer(many=True)})
    def get(self, request):
        staff = User.objects.filter(role__in=['Staff', 'Manager'], is_active=True).order_by('-created_at')
        return success_response({'staff': UserSerializer(staff, many=True).data})

    @extend_schema(summary="Create a staff member", request=StaffCreateSerializer)
    def post(self, request):
        serializer = StaffCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = create_user(**serializer.validated_data)
        return success_response(
            {'user': public_user(user, with_permissions=True)},
            message='Staff member created successfully',
            status=status.HTTP_201_CREATED,
        )


class StaffPermissionsView(APIView):
    required_roles = {'PUT': ('Admin',)}

    @extend_schema(summary="Replace a staff member's permissions", request=PermissionsUpdateSerializer)
    def put(self, request, pk):
        user = get_or_404(User, pk=pk)
        if user.role == 'Admin':
            raise StateConflict('Cannot modify admin permissions')

        serializer = PermissionsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.permissions = serializer.validated_data['permissions']
        user.save(update_fields=['permissions', 'updated_at'])

        return success_response({'user': UserSerializer(user).data},
                                message='Permissions updated successfully')


class StaffDetailView(APIView):
    required_roles = {'DELETE': ('Admin',)}

    @extend_schema(summary="Deactivate a staff member")
    def delete(self, request, pk):
        user = get_or_404(User, pk=pk)
        if user.role == 'Admin':
            raise StateConflict('Cannot delete admin user')

        user.is_active = False
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info("Deactivated user %s", user.username)
        return success_response(message='Staff member deleted successfully')
