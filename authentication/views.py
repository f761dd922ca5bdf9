from rest_framework import generics, status, permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView
from django.db import connection, DatabaseError
from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiExample

from .models import CustomUser
from .permissions import IsManager
from .serializers import UserSerializer, ProfileSerializer, LoginSerializer, RegisterSerializer

# =============== AUTHENTICATION VIEWS ===============

class CustomTokenObtainPairView(TokenObtainPairView):
    """
    JWT authentication endpoint for pre-authorized restaurant users.

    Only emails registered by a manager can log in; deactivated accounts
    are rejected. The user's role is added to the token claims.
    """
    serializer_class = LoginSerializer

    @extend_schema(
        summary="User Login with JWT Token",
        request=LoginSerializer,
        responses={
            200: {
                'type': 'object',
                'properties': {
                    'refresh': {'type': 'string', 'description': 'JWT refresh token'},
                    'access': {'type': 'string', 'description': 'JWT access token'},
                    'user': {'type': 'object', 'description': 'User information'},
                    'role': {'type': 'string', 'description': 'manager or staff'},
                }
            },
            400: {'description': 'Invalid credentials, unknown email or deactivated account'},
        },
        examples=[
            OpenApiExample(
                'Manager Login',
                value={
                    "email": "manager@biryanihouse.in",
                    "password": "SecurePassword123!",
                }
            ),
        ]
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data['user']

        # Update last login
        user.last_login_at = timezone.now()
        user.save(update_fields=['last_login_at'])

        refresh = RefreshToken.for_user(user)
        refresh['role'] = user.role
        refresh['name'] = user.display_name

        return Response({
            'refresh': str(refresh),
            'access': str(refresh.access_token),
            'user': UserSerializer(user).data,
            'role': user.role,
        }, status=status.HTTP_200_OK)


@extend_schema(
    summary="Register a pre-authorized account",
    description="Sets the password of an account a manager created. Unknown emails are rejected.",
    request=RegisterSerializer,
    responses={201: UserSerializer, 400: {'description': 'Email not authorized or already registered'}},
)
@api_view(['POST'])
@permission_classes([permissions.AllowAny])
def register(request):
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()
    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


# =============== USER MANAGEMENT ===============

class StaffUserListCreateView(generics.ListCreateAPIView):
    """
    get: List restaurant users
    post: Pre-authorize a new user by email (managers only)
    """
    queryset = CustomUser.objects.all().order_by('role', 'email')
    serializer_class = UserSerializer
    permission_classes = [IsManager]
    filterset_fields = ['role', 'is_active']


class StaffUserDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    get: User details
    put/patch: Change role, name or active flag (managers only)
    delete: Remove the account (managers only)
    """
    queryset = CustomUser.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsManager]


class MyProfileView(generics.RetrieveUpdateAPIView):
    """
    Get and update current user's profile information.
    """
    serializer_class = ProfileSerializer
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(summary="Get My Profile", responses={200: ProfileSerializer})
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_object(self):
        return self.request.user


# =============== SYSTEM HEALTH ===============

@extend_schema(
    summary="System Health Check",
    description="Check system health and database connectivity",
    responses={
        200: {
            'type': 'object',
            'properties': {
                'status': {'type': 'string'},
                'timestamp': {'type': 'string'},
                'database': {'type': 'string'},
            }
        }
    }
)
@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health_check(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        return Response({
            'status': 'unhealthy',
            'timestamp': timezone.now().isoformat(),
            'database': 'disconnected',
            'error': str(e)
        }, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({
        'status': 'healthy',
        'timestamp': timezone.now().isoformat(),
        'database': 'connected',
    })
