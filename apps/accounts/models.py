from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""
    
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user
    
    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        
        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')
        
        return self.create_user(email, password, **extra_fields)


def profile_photo_path(instance, filename):
    """Store photos as profile-photos/<user id>_<uuid>.<ext>."""
    extension = filename.rsplit('.', 1)[-1].lower()
    return f"profile-photos/{instance.id}_{uuid.uuid4().hex}.{extension}"


class User(AbstractBaseUser, PermissionsMixin):
    """Custom user model with email authentication and dependent accounts."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    full_name = models.CharField(max_length=150)
    
    # Dependents are managed sub-accounts (e.g. a child profile)
    is_dependent = models.BooleanField(default=False)
    master_user = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='dependents'
    )
    
    profile_photo = models.FileField(upload_to=profile_photo_path, blank=True)
    
    # Password reset
    verification_token = models.CharField(max_length=64, blank=True, null=True)
    
    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    
    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)
    
    objects = UserManager()
    
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['full_name']
    
    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email']),
            models.Index(fields=['master_user']),
        ]
    
    def __str__(self):
        return self.email
    
    def get_display_name(self):
        """Return full name or email prefix."""
        return self.full_name or self.email.split('@')[0]
    
    @property
    def profile_photo_url(self):
        if not self.profile_photo:
            return None
        return self.profile_photo.url
    
    def is_dependent_of(self, user):
        return self.is_dependent and self.master_user_id == user.id
