# core/models.py
from django.conf import settings
from django.db import models


class SystemSetting(models.Model):
    """Runtime key/value settings editable from the admin"""
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'System Setting'
        verbose_name_plural = 'System Settings'
        ordering = ['key']

    def __str__(self):
        return f"{self.key}: {self.value}"

    @classmethod
    def get_setting(cls, key, default=None):
        """Get a setting value by key"""
        try:
            setting = cls.objects.get(key=key, is_active=True)
            return setting.value
        except cls.DoesNotExist:
            return default

    @classmethod
    def get_choice_setting(cls, key, choices, default):
        """A setting restricted to ``choices``; anything else reads as ``default``"""
        value = cls.get_setting(key, default)
        return value if value in choices else default

    @classmethod
    def set_setting(cls, key, value, description=''):
        """Set or update a setting"""
        setting, created = cls.objects.get_or_create(
            key=key,
            defaults={
                'value': str(value),
                'description': description,
                'is_active': True
            }
        )
        if not created:
            setting.value = str(value)
            setting.description = description or setting.description
            setting.is_active = True
            setting.save()
        return setting


class AuditLog(models.Model):
    """Audit trail of resource writes and session events"""
    CREATE = 'create'
    UPDATE = 'update'
    LOGIN = 'login'
    LOGOUT = 'logout'
    LOGIN_FAILED = 'login_failed'
    SESSION_EXPIRED = 'session_expired'

    ACTION_CHOICES = [
        (CREATE, 'Create'),
        (UPDATE, 'Update'),
        (LOGIN, 'Login'),
        (LOGOUT, 'Logout'),
        (LOGIN_FAILED, 'Login Failed'),
        (SESSION_EXPIRED, 'Session Expired'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)

    # Logical table name, e.g. "appointments"
    table = models.CharField(max_length=50)
    object_id = models.CharField(max_length=64, blank=True)
    object_repr = models.CharField(max_length=200, blank=True)

    changes = models.JSONField(default=dict, blank=True)
    description = models.TextField(blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True)

    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['user', 'timestamp'], name='core_auditl_user_id_ts_idx'),
            models.Index(fields=['table', 'timestamp'], name='core_auditl_table_ts_idx'),
            models.Index(fields=['action', 'timestamp'], name='core_auditl_action_ts_idx'),
        ]
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'

    def __str__(self):
        user_str = self.user.username if self.user else 'Anonymous'
        return f"{user_str} {self.action} {self.table} at {self.timestamp}"

    @classmethod
    def record(cls, action, table, user_id=None, object_id='', object_repr='', changes=None,
               description='', request=None):
        """
        Store one audit entry

        Args:
            action: One of the ACTION_CHOICES keys
            table: Logical table name the action touched
            user_id: Acting user's primary key (None for anonymous)
            changes: Dict of written fields {field_name: new_value}
            request: HttpRequest for IP/user agent
        """
        entry = cls(
            user_id=user_id,
            action=action,
            table=table,
            object_id=str(object_id or ''),
            object_repr=str(object_repr or '')[:200],
            changes={k: cls.format_field_value(v) for k, v in (changes or {}).items()},
            description=description,
        )

        if request is not None:
            entry.ip_address = cls.get_client_ip(request)
            entry.user_agent = request.META.get('HTTP_USER_AGENT', '')[:255]

        entry.save()
        return entry

    @staticmethod
    def get_client_ip(request):
        """Get client IP address from request"""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')

    @staticmethod
    def format_field_value(value):
        """Format field value for storage in the JSON changes column"""
        if value is None:
            return None
        if isinstance(value, bool):
            return 'Yes' if value else 'No'
        if isinstance(value, models.Model):
            return str(value)
        if hasattr(value, 'isoformat'):
            return value.isoformat()
        return str(value)
