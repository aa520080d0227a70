import random

from django.utils import timezone


def generate_reference(prefix, model, field, attempts=20):
    """
    Build a ``PREFIX-YYYYMMDD-NNNN`` reference that is not used yet by ``model.field``.
    """
    today = timezone.localdate().strftime('%Y%m%d')
    for _ in range(attempts):
        candidate = f"{prefix}-{today}-{random.randint(0, 9999):04d}"
        if not model._default_manager.filter(**{field: candidate}).exists():
            return candidate
    raise RuntimeError(f"Could not allocate a unique {prefix} reference for {today}")
