# companies/urls.py
from rest_framework.routers import SimpleRouter

from companies.views import CompanyViewSet

router = SimpleRouter()
router.register(r"companies", CompanyViewSet, basename="companies")

urlpatterns = router.urls
