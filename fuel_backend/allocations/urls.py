# allocations/urls.py
from rest_framework.routers import SimpleRouter

from allocations.views import AllocationViewSet

router = SimpleRouter()
router.register(r"allocations", AllocationViewSet, basename="allocations")

urlpatterns = router.urls
