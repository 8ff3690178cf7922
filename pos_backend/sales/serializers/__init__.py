from .sale import OrderNumberPreviewSerializer, SaleLineItemSerializer, SaleSerializer

__all__ = [
    "SaleSerializer",
    "SaleLineItemSerializer",
    "OrderNumberPreviewSerializer",
]
