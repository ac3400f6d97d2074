# vendors/filters.py

import django_filters
from django.db.models import Q

from vendors.models import Vendor


class VendorFilter(django_filters.FilterSet):
    """
    Map listing filters.

    - q: case-insensitive match on name or description
    - online: true/false
    """

    q = django_filters.CharFilter(method="filter_q")
    online = django_filters.BooleanFilter(field_name="online")

    class Meta:
        model = Vendor
        fields = ["online"]

    def filter_q(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))
