from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email", "name", "role", "department", "service", "is_active")
    search_fields = ("email", "name", "national_id")
    list_filter = ("role", "is_active", "is_staff")
    ordering = ("id",)
    filter_horizontal = ("groups", "user_permissions")
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("name", "national_id", "date_of_birth", "contact",
                                "profile_picture")}),
        ("Portal Role", {"fields": ("role", "department", "service")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser",
                                    "groups", "user_permissions")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "name", "role", "department", "service",
                       "password1", "password2"),
        }),
    )
