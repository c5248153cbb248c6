from mongoengine import BooleanField, DateTimeField, EmailField, StringField

from app.models.base import BaseDocument
from app.utils.base import Role


DEFAULT_PHOTO = "https://avatars.githubusercontent.com/u/19819005?v=4"
DEFAULT_BIO = "I'm a new user."


class User(BaseDocument):
    """User document.

    Fields:
    - name (str): Display name
    - email (EmailStr, unique): Login identifier
    - password (str, hashed): Bcrypt-hashed password
    - role (str): user/admin/creator
    - is_verified (bool): Set once the email verification link is consumed
    - bio/photo (str): Profile details
    - verification_token/reset_password_token (str|None): SHA-256 digest of the
      pending one-time token, with its expiry
    """
    name = StringField(required=True, null=False)
    email = EmailField(required=True, null=False, unique=True)
    password = StringField(required=True, null=False)
    role = StringField(required=True, null=False, default=Role.USER.value, choices=Role.choices())
    is_verified = BooleanField(required=True, null=False, default=False)
    bio = StringField(required=False, null=False, default=DEFAULT_BIO)
    photo = StringField(required=False, null=False, default=DEFAULT_PHOTO)

    verification_token = StringField(required=False, null=True)
    verification_token_expires_at = DateTimeField(required=False, null=True)
    reset_password_token = StringField(required=False, null=True)
    reset_password_token_expires_at = DateTimeField(required=False, null=True)

    private_fields = (
        "password",
        "verification_token",
        "verification_token_expires_at",
        "reset_password_token",
        "reset_password_token_expires_at",
    )

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
            {"fields": ["verification_token"], "sparse": True},
            {"fields": ["reset_password_token"], "sparse": True},
        ],
    }
