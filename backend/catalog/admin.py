from django.contrib import admin

from .models import Department, Service


class ServiceInline(admin.TabularInline):
    model = Service
    extra = 0
    fields = ("name", "description")


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("id", "name")
    search_fields = ("name",)
    inlines = [ServiceInline]


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "department")
    list_filter = ("department",)
    search_fields = ("name", "department__name")
    list_select_related = ("department",)
