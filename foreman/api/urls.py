"""
Foreman API URLs.

Include this in your project's urlpatterns:

    path('api/foreman/', include('foreman.api.urls')),
"""

from rest_framework.routers import DefaultRouter

from .views import (
    ProductSnapshotViewSet,
    ProductViewSet,
    ProjectViewSet,
    RecipeSnapshotViewSet,
    RecipeViewSet,
    TaskViewSet,
)

router = DefaultRouter()
router.register("recipes", RecipeViewSet)
router.register("products", ProductViewSet)
router.register("projects", ProjectViewSet)
router.register("tasks", TaskViewSet)
router.register("recipe-snapshots", RecipeSnapshotViewSet)
router.register("product-snapshots", ProductSnapshotViewSet)

urlpatterns = router.urls
