# trucks/urls.py
from rest_framework.routers import SimpleRouter

from trucks.views import TruckViewSet

router = SimpleRouter()
router.register(r"trucks", TruckViewSet, basename="trucks")

urlpatterns = router.urls
