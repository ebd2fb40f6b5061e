"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserChangeForm, UserCreationForm
from django.utils.translation import gettext_lazy as _

from .models import CustomUser, GuideProfile


class CustomUserCreationForm(UserCreationForm):
    class Meta:
        model = CustomUser
        fields = ("email", "name")


class CustomUserChangeForm(UserChangeForm):
    class Meta:
        model = CustomUser
        fields = ("email", "name", "phone")


class GuideProfileInline(admin.StackedInline):
    model = GuideProfile
    can_delete = False
    extra = 0
    readonly_fields = ("approved_at", "created_at", "updated_at")


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    form = CustomUserChangeForm
    add_form = CustomUserCreationForm
    inlines = [GuideProfileInline]
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Personal info"), {"fields": ("name", "phone")}),
        (_("Guide"), {"fields": ("is_guide",)}),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "password1", "password2", "is_staff", "is_superuser"),
            },
        ),
    )
    list_display = ("email", "name", "phone", "is_guide", "is_active", "is_staff")
    list_filter = ("is_guide", "is_active", "is_staff")
    search_fields = ("email", "name", "phone")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "date_joined")


@admin.register(GuideProfile)
class GuideProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "first_name", "last_name", "city", "expertise", "is_approved", "created_at")
    list_filter = ("is_approved", "city")
    search_fields = ("user__email", "first_name", "last_name", "city")
    readonly_fields = ("approved_at", "created_at", "updated_at")
    actions = ["approve_selected"]

    @admin.action(description=_("Approve selected guide applications"))
    def approve_selected(self, request, queryset):  # type: ignore
        approved = 0
        for profile in queryset.filter(is_approved=False):
            profile.approve()
            approved += 1
        self.message_user(request, _("%d guide(s) approved.") % approved, messages.SUCCESS)
