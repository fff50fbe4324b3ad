"""Category API client."""

from fintrack.schemas.category import Category
from fintrack.services.resource_service import ResourceService


class CategoryService(ResourceService[Category]):
    path = "/api/categories"
    model = Category
    singular = "category"
    plural = "categories"
