from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from hr_portal.users.models import User


class UserSerializer(serializers.ModelSerializer[User]):
    full_name = serializers.CharField(source="name", read_only=True)
    groups = serializers.SlugRelatedField(
        many=True,
        read_only=True,
        slug_field="name",
    )
    id = serializers.IntegerField(read_only=True)
    employee_id = serializers.SerializerMethodField()

    # user_type changes go through admins only, see UserViewSet
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    user_type = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "user_type",
            "groups",
            "employee_id",
        ]

    def get_employee_id(self, obj: User) -> int | None:
        employee = getattr(obj, "employee", None)
        return getattr(employee, "pk", None)


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    user_type = serializers.ChoiceField(
        choices=User.UserType.choices, default=User.UserType.EMPLOYEE
    )
    name = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            msg = "Email already exists"
            raise serializers.ValidationError(msg)
        return value

    def validate_password(self, value: str) -> str:
        validate_password(value)
        return value

    def create(self, validated_data) -> User:
        return User.objects.create_user(
            username=validated_data["email"],
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data.get("name", ""),
            user_type=validated_data["user_type"],
        )


class PortalTokenObtainPairSerializer(TokenObtainPairSerializer):
    """JWT pair that also carries the user's type for client-side routing."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["user_type"] = user.user_type
        token["email"] = user.email
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = {
            "id": self.user.id,
            "email": self.user.email,
            "user_type": self.user.user_type,
        }
        return data
