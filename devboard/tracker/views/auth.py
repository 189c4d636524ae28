# ============================================
# tracker/views/auth.py
# ============================================
import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.serializers.auth import (
    LoginOutputSerializer,
    LoginSerializer,
    MessageSerializer,
    PasswordResetConfirmSerializer,
    PasswordResetRequestSerializer,
    RegisterOutputSerializer,
    RegisterSerializer,
    TokenLinkSerializer,
)
from tracker.serializers.user import UserBriefSerializer
from tracker.services import account, lockout
from tracker.views.utils import (
    OpenApiResponse, ErrorSerializer, extend_schema, q_str, responses_ok, std_errors,
)

logger = logging.getLogger(__name__)

User = get_user_model()


class LoginAPIView(APIView):
    """
    POST: Session login. Repeated failures lock the account for a while.
    """
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Auth"],
        summary="Log in",
        request=LoginSerializer,
        responses=responses_ok(
            LoginOutputSerializer,
            extra={
                400: OpenApiResponse(ErrorSerializer, description="Bad Request"),
                401: OpenApiResponse(ErrorSerializer, description="Invalid credentials"),
                403: OpenApiResponse(ErrorSerializer, description="Email not verified"),
                423: OpenApiResponse(ErrorSerializer, description="Account locked"),
            },
        ),
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data['username']

        existing = User.objects.filter(username=username).first()
        if existing is not None and lockout.is_locked(existing):
            logger.warning("[auth] login refused for locked user=%s", existing.pk)
            return Response(
                {'detail': 'Account is temporarily locked after too many failed attempts'},
                status=status.HTTP_423_LOCKED
            )

        user = authenticate(request, username=username, password=serializer.validated_data['password'])
        if user is None:
            if existing is not None:
                lockout.register_failure(existing)
            return Response({'detail': 'Invalid username or password'}, status=status.HTTP_401_UNAUTHORIZED)

        lockout.register_success(user)
        if account.login_requires_verification(user):
            return Response(
                {'detail': 'Email address is not verified'},
                status=status.HTTP_403_FORBIDDEN
            )
        login(request, user)
        logger.info("[auth] user=%s logged in", user.pk)
        return Response(LoginOutputSerializer({'user': user}).data)


class LogoutAPIView(APIView):

    @extend_schema(tags=["Auth"], summary="Log out", request=None, responses={204: None})
    def post(self, request):
        logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeAPIView(APIView):

    @extend_schema(tags=["Auth"], summary="Current user", responses=responses_ok(UserBriefSerializer, extra=std_errors()))
    def get(self, request):
        return Response(UserBriefSerializer(request.user).data)


class RegisterAPIView(APIView):
    """
    POST: Create an account. A verification link is mailed to the address.
    """
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Auth"],
        summary="Register",
        request=RegisterSerializer,
        responses=responses_ok(
            RegisterOutputSerializer, code=201,
            extra={400: OpenApiResponse(ErrorSerializer, description="Taken username/email or weak password")},
        ),
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = account.register(**serializer.validated_data)
        return Response(
            RegisterOutputSerializer({
                'message': 'Registration successful. Check your email to verify your address.',
                'user': user,
            }).data,
            status=status.HTTP_201_CREATED
        )


class VerifyEmailAPIView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Auth"],
        summary="Verify email address",
        parameters=[q_str("uid", "User id from the link", required=True), q_str("token", "Token from the link", required=True)],
        responses=responses_ok(
            MessageSerializer,
            extra={400: OpenApiResponse(ErrorSerializer, description="Invalid or expired link")},
        ),
    )
    def get(self, request):
        serializer = TokenLinkSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        account.verify_email(**serializer.validated_data)
        return Response({'message': 'Email verified successfully. You can now log in.'})


class PasswordResetRequestAPIView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Auth"],
        summary="Request a password reset link",
        request=PasswordResetRequestSerializer,
        responses=responses_ok(MessageSerializer, extra={400: OpenApiResponse(ErrorSerializer, description="Bad Request")}),
    )
    def post(self, request):
        serializer = PasswordResetRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        account.request_password_reset(email=serializer.validated_data['email'])
        return Response({'message': 'If an account uses this address, a reset link has been sent.'})


class PasswordResetConfirmAPIView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Auth"],
        summary="Set a new password from a reset link",
        request=PasswordResetConfirmSerializer,
        responses=responses_ok(
            MessageSerializer,
            extra={400: OpenApiResponse(ErrorSerializer, description="Invalid link or weak password")},
        ),
    )
    def post(self, request):
        serializer = PasswordResetConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        account.reset_password(**serializer.validated_data)
        return Response({'message': 'Password reset successfully'})
