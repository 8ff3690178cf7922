# sales/api/filters.py

import django_filters

from sales.models import Sale


class SaleFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Sale.STATUS_CHOICES)
    payment_method = django_filters.CharFilter(lookup_expr="iexact")
    order_number = django_filters.CharFilter(lookup_expr="icontains")
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    inventory_pending = django_filters.BooleanFilter(
        field_name="inventory_settled_at",
        lookup_expr="isnull",
    )

    class Meta:
        model = Sale
        fields = ["status", "payment_method", "order_number", "date_from", "date_to"]
