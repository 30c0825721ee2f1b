from pricelist.models.material import Material
from pricelist.models.pricing_type import FinishType, ProductType
from pricelist.models.product import Collection, Product, TechCardLineRow

__all__ = [
    "Material",
    "ProductType",
    "FinishType",
    "Collection",
    "Product",
    "TechCardLineRow",
]
