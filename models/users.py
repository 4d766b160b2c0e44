from enum import Enum

from tortoise import models, fields


class UserRole(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


class User(models.Model):
    id = fields.IntField(pk=True)
    discord_id = fields.BigIntField(unique=True)
    username = fields.CharField(max_length=255)
    role = fields.CharEnumField(UserRole, default=UserRole.BUYER)
    is_verified = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def get_name(self):
        return self.username

    def __str__(self) -> str:
        return f"User {self.id}: {self.username} ({self.role})"
