"""
Accounts app models.

Defines the closed ``UserRole`` variant and a custom User model that
extends Django's ``AbstractUser``.  Users log in with their e-mail
address; there is no separate username.

Role rules
----------
* **Citizen** — self-registered; submits and pays for service requests.
* **Officer** — created by an admin and assigned to exactly one
  (department, service) pair.  The pair must be consistent: the service
  must belong to the department.
* **Admin**   — created by an admin (or ``createsuperuser``); unrestricted
  CRUD over users, departments and services plus reporting.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.db.models import Q

from core.domain.uploads import PurposeUploadPath


class UserRole(models.TextChoices):
    """
    Closed set of portal roles.

    Stored verbatim in the session and on the user row; anything outside
    this set is treated as "no session" by the Authorization Gate.
    """

    CITIZEN = "citizen", "Citizen"
    OFFICER = "officer", "Officer"
    ADMIN = "admin", "Admin"


class UserManager(BaseUserManager):
    """Manager for the e-mail–based ``User`` model."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The e-mail address must be set.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", UserRole.CITIZEN)
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", UserRole.ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("role") != UserRole.ADMIN:
            raise ValueError("Superuser must have role=admin.")
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Portal account for citizens, officers and admins.

    ``department`` / ``service`` are only meaningful for officers and are
    cleared by the service layer for every other role.  The database
    enforces that an officer has both set; the service layer additionally
    enforces that ``service.department == department``.
    """

    # E-mail replaces the username; the single ``name`` replaces
    # first/last name.
    username = None
    first_name = None
    last_name = None

    name = models.CharField(
        max_length=150,
        verbose_name="Full Name",
    )
    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CITIZEN,
        verbose_name="Role",
        db_index=True,
    )
    national_id = models.CharField(
        max_length=32,
        blank=True,
        default="",
        verbose_name="National ID",
        db_index=True,
    )
    date_of_birth = models.DateField(
        null=True,
        blank=True,
        verbose_name="Date of Birth",
    )
    contact = models.CharField(
        max_length=50,
        blank=True,
        default="",
        verbose_name="Contact",
    )
    profile_picture = models.ImageField(
        upload_to=PurposeUploadPath("profile_pic"),
        null=True,
        blank=True,
        verbose_name="Profile Picture",
    )

    # ── Officer assignment ───────────────────────────────────────────
    department = models.ForeignKey(
        "catalog.Department",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="officers",
        verbose_name="Assigned Department",
    )
    service = models.ForeignKey(
        "catalog.Service",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="officers",
        verbose_name="Assigned Service",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(role__in=UserRole.values),
                name="user_role_valid",
            ),
            models.CheckConstraint(
                condition=~Q(role=UserRole.OFFICER)
                | Q(department__isnull=False, service__isnull=False),
                name="officer_has_department_and_service",
            ),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}> - {self.get_role_display()}"

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email

    # ── Role predicates ──────────────────────────────────────────────

    @property
    def is_citizen(self) -> bool:
        return self.role == UserRole.CITIZEN

    @property
    def is_officer(self) -> bool:
        return self.role == UserRole.OFFICER

    @property
    def is_portal_admin(self) -> bool:
        return self.role == UserRole.ADMIN
