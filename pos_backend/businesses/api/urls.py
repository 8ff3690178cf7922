# businesses/api/urls.py

from django.urls import path

from businesses.api.views import PaymentMethodListView

app_name = "businesses"

urlpatterns = [
    path("payment-methods/", PaymentMethodListView.as_view(), name="payment-methods"),
]
