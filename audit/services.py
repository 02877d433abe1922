"""
Audit logging helpers.

Views build an ``AuditLogger`` from the request and hand it to services, so
the rows written inside a service transaction carry the acting user, their
role, IP address and user agent.
"""

import json
import logging

from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import validate_ipv46_address

from .models import AuditAction, AuditLog

logger = logging.getLogger(__name__)


def to_jsonable(values):
    """Round-trip ``values`` through JSON so Decimals, UUIDs and dates compare as stored."""
    if values is None:
        return None
    return json.loads(json.dumps(values, cls=DjangoJSONEncoder))


def diff_objects(old, new):
    """
    Reduce an old/new pair to the keys that changed.

    Returns ``(None, new)`` when there is no previous state; otherwise a pair
    of dicts holding only the differing keys (both empty when nothing changed).
    """
    new = to_jsonable(new) or {}
    if not old:
        return None, new

    old = to_jsonable(old)
    changed_old = {}
    changed_new = {}
    for key in set(old) | set(new):
        if old.get(key) != new.get(key):
            changed_old[key] = old.get(key)
            changed_new[key] = new.get(key)
    return changed_old, changed_new


def _valid_ip(value):
    value = (value or '').strip()
    if not value:
        return None
    try:
        validate_ipv46_address(value)
    except ValidationError:
        return None
    return value


def get_client_ip(request):
    """
    Client address from the first X-Forwarded-For entry, then X-Real-IP,
    then REMOTE_ADDR. Values that are not IPv4/IPv6 addresses are skipped.
    """
    if request is None:
        return None

    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    candidates = [
        forwarded.split(',')[0],
        request.META.get('HTTP_X_REAL_IP'),
        request.META.get('REMOTE_ADDR'),
    ]
    for candidate in candidates:
        ip_address = _valid_ip(candidate)
        if ip_address:
            return ip_address
    return None


class AuditLogger:
    """Writes ``AuditLog`` rows on behalf of one acting user."""

    def __init__(self, user=None, ip_address=None, user_agent=''):
        self.user = user if user is not None and user.is_authenticated else None
        self.ip_address = ip_address
        self.user_agent = user_agent or ''

    @classmethod
    def from_request(cls, request):
        return cls(
            user=getattr(request, 'user', None),
            ip_address=get_client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT', ''),
        )

    def log(self, module, action, record_id='', old_values=None, new_values=None, label=''):
        entry = AuditLog.objects.create(
            user=self.user,
            user_role=getattr(self.user, 'role', '') or '',
            module=module,
            action=action,
            record_id=str(record_id or ''),
            label=label or '',
            old_values=to_jsonable(old_values),
            new_values=to_jsonable(new_values),
            ip_address=self.ip_address,
            user_agent=self.user_agent,
        )
        logger.info(f"Audit {action} {module} {entry.record_id} by {getattr(self.user, 'email', 'system')}")
        return entry

    def log_change(self, module, record_id, old_values, new_values, label=''):
        """Log an UPDATE holding only the changed fields; skipped when nothing changed."""
        changed_old, changed_new = diff_objects(old_values, new_values)
        if not changed_new:
            return None
        return self.log(
            module=module,
            action=AuditAction.UPDATE,
            record_id=record_id,
            old_values=changed_old,
            new_values=changed_new,
            label=label,
        )
