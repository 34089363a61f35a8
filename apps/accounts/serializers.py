from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Library owner profile."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'library_name',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'created_at', 'last_login']


class UserLoginSerializer(serializers.Serializer):
    """Serializer for owner login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
