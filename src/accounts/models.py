import uuid

from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin,
)
from django.db import models
from django.utils import timezone


ROLE_CODE_PREFIX = {
    "ADMIN": "AD",
    "SALES": "SL",
    "MANAGEMENT": "MP",
}


class UserManager(BaseUserManager):
    """Custom manager for the User model that uses email as the unique identifier."""

    def next_user_code(self, role):
        """Return the next sequential code for ``role`` (``SL_001``, ``SL_002``...).

        Suffixes are compared as numbers so ``SL_1000`` follows ``SL_999``.
        """
        prefix = ROLE_CODE_PREFIX.get(str(role).upper(), "US")
        codes = self.filter(user_code__startswith=f"{prefix}_").values_list("user_code", flat=True)
        numbers = [
            int(suffix)
            for _, _, suffix in (code.partition("_") for code in codes)
            if suffix.isdigit()
        ]
        return f"{prefix}_{max(numbers, default=0) + 1:03d}"

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("L'adresse e-mail est obligatoire.")
        email = self.normalize_email(email)
        extra_fields.setdefault("is_active", True)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", User.Role.ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Le superutilisateur doit avoir is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Le superutilisateur doit avoir is_superuser=True.")

        return self.create_user(email, password, **extra_fields)

    def active_sales_reps(self):
        return self.filter(role=User.Role.SALES, is_active=True).order_by("first_name", "last_name")


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model for the territory performance platform.

    Uses email as the unique identifier instead of a username.
    The role decides which territories and representatives the user
    may see in performance views.
    """

    class Role(models.TextChoices):
        ADMIN = "ADMIN", "Administrateur"
        MANAGEMENT = "MANAGEMENT", "Direction commerciale"
        SALES = "SALES", "Representant"

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )
    email = models.EmailField(
        "adresse e-mail",
        unique=True,
        error_messages={
            "unique": "Un utilisateur avec cette adresse e-mail existe deja.",
        },
    )
    first_name = models.CharField("prenom", max_length=150)
    last_name = models.CharField("nom", max_length=150, blank=True, default="")
    user_code = models.CharField("code utilisateur", max_length=20, unique=True, blank=True)
    role = models.CharField(
        "role",
        max_length=20,
        choices=Role.choices,
        default=Role.SALES,
        db_index=True,
    )
    is_active = models.BooleanField("actif", default=True, db_index=True)
    is_staff = models.BooleanField("membre du personnel", default=False)
    date_joined = models.DateTimeField("date d'inscription", default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name"]

    class Meta:
        verbose_name = "utilisateur"
        verbose_name_plural = "utilisateurs"
        ordering = ["first_name", "last_name"]

    def __str__(self):
        return self.get_full_name() or self.email

    def save(self, *args, **kwargs):
        if not self.user_code:
            self.user_code = User.objects.next_user_code(self.role)
        super().save(*args, **kwargs)

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def get_short_name(self):
        return self.first_name

    # ------------------------------------------------------------------
    # Role helper properties
    # ------------------------------------------------------------------

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def is_management(self):
        return self.role == self.Role.MANAGEMENT

    @property
    def is_sales(self):
        return self.role == self.Role.SALES
