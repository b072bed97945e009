"""
Catalog app models.

Government departments and the services they offer.  Citizens apply for
a ``Service``; officers are assigned to exactly one (department, service)
pair, which is what scopes the requests they may review.
"""

from django.db import models


class Department(models.Model):
    """A government department (e.g. Transport, Civil Registry)."""

    name = models.CharField(
        max_length=150,
        unique=True,
        verbose_name="Department Name",
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )

    class Meta:
        verbose_name = "Department"
        verbose_name_plural = "Departments"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Service(models.Model):
    """
    A service offered by a department (e.g. "Driving licence renewal").

    Deleting a department that still owns services is refused at the
    database level (``PROTECT``) and reported as a conflict by the
    service layer.
    """

    name = models.CharField(
        max_length=150,
        verbose_name="Service Name",
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )
    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,
        related_name="services",
        verbose_name="Department",
    )

    class Meta:
        verbose_name = "Service"
        verbose_name_plural = "Services"
        ordering = ["department__name", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["department", "name"],
                name="unique_service_name_per_department",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.department_id})"
