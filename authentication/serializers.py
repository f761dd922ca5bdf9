from rest_framework import serializers
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password

from .models import CustomUser


class UserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password], required=False)
    confirm_password = serializers.CharField(write_only=True, required=False)
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = CustomUser
        fields = [
            'id', 'email', 'name', 'display_name', 'phone', 'role',
            'password', 'confirm_password', 'is_active', 'last_login_at'
        ]
        extra_kwargs = {
            'password': {'write_only': True},
            'last_login_at': {'read_only': True}
        }

    def validate_email(self, value):
        queryset = CustomUser.objects.filter(email__iexact=value)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value.lower()

    def validate(self, attrs):
        if 'password' in attrs and 'confirm_password' in attrs:
            if attrs['password'] != attrs['confirm_password']:
                raise serializers.ValidationError("Passwords don't match")
        return attrs

    def create(self, validated_data):
        validated_data.pop('confirm_password', None)
        password = validated_data.pop('password', None)
        email = validated_data.pop('email')
        if password:
            return CustomUser.objects.create_user(email, password, **validated_data)
        # Password is set on first registration
        return CustomUser.objects.preauthorize(email, **validated_data)

    def update(self, instance, validated_data):
        validated_data.pop('confirm_password', None)
        password = validated_data.pop('password', None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        if password:
            instance.set_password(password)

        instance.save()
        return instance


class ProfileSerializer(UserSerializer):
    """Own profile: email and role are managed by a manager"""

    class Meta(UserSerializer.Meta):
        read_only_fields = ['email', 'role', 'is_active']


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()

    def validate(self, attrs):
        email = attrs.get('email')
        password = attrs.get('password')

        if not CustomUser.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError('This email is not authorized to access the system')

        user = authenticate(username=email, password=password)
        if not user:
            inactive = CustomUser.objects.filter(email__iexact=email, is_active=False).exists()
            if inactive:
                raise serializers.ValidationError('Account is deactivated')
            raise serializers.ValidationError('Invalid email or password')

        attrs['user'] = user
        return attrs


class RegisterSerializer(serializers.Serializer):
    """First-time registration of an account a manager has pre-authorized"""
    email = serializers.EmailField()
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, validators=[validate_password])

    def validate_email(self, value):
        try:
            user = CustomUser.objects.get(email__iexact=value)
        except CustomUser.DoesNotExist:
            raise serializers.ValidationError(
                'This email is not authorized for registration. Please contact your administrator.'
            )
        if not user.is_active:
            raise serializers.ValidationError(
                'This account has been deactivated. Please contact your administrator.'
            )
        if user.has_usable_password():
            raise serializers.ValidationError('This account is already registered.')
        self.context['user'] = user
        return value

    def save(self):
        user = self.context['user']
        user.set_password(self.validated_data['password'])
        if self.validated_data.get('name'):
            user.name = self.validated_data['name']
        user.save()
        return user
