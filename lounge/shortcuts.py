from django.db.models import QuerySet
from rest_framework.exceptions import NotFound


def get_or_404(model, **kwargs):
    """Like ``get_object_or_404`` but raises an API ``NotFound`` named after the model."""
    queryset = model if isinstance(model, QuerySet) else model._default_manager.all()
    obj = queryset.filter(**kwargs).first()
    if obj is None:
        name = str(queryset.model._meta.verbose_name)
        raise NotFound(f"{name[:1].upper()}{name[1:]} not found")
    return obj
