# trucks/filters.py

import django_filters

from trucks.models import Truck, TruckStatus


class TruckFilter(django_filters.FilterSet):
    company = django_filters.NumberFilter(field_name="company_id")
    status = django_filters.CharFilter(method="filter_status")
    product = django_filters.CharFilter(field_name="product", lookup_expr="iexact")
    truck_trailer = django_filters.CharFilter(field_name="truck_trailer", lookup_expr="icontains")

    class Meta:
        model = Truck
        fields = ["company", "status", "product", "truck_trailer"]

    def filter_status(self, queryset, name, value):
        # "PENDING" is stored as the empty status
        status = (value or "").strip().upper()
        if status == "PENDING":
            status = TruckStatus.PENDING
        return queryset.filter(status=status)
