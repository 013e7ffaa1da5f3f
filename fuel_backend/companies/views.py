# companies/views.py

"""
COMPANY REGISTRY API

- list/retrieve/by-slug: pure reads (admin company first, then alphabetical)
- create: provisions zeroed AGO/PMS allocations
- destroy: cascades to trucks, allocations and audit entries; the admin
  company is never deleted (responds with deleted=false)
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.api import domain_error_response
from common.exceptions import FuelTrackerError
from companies.serializers import CompanySerializer, CompanyWriteSerializer
from companies.services import registry


class CompanyViewSet(viewsets.ViewSet):
    serializer_class = CompanySerializer

    def list(self, request):
        companies = registry.list_companies()
        return Response(CompanySerializer(companies, many=True).data)

    def retrieve(self, request, pk=None):
        try:
            company = registry.get_company(pk)
        except FuelTrackerError as exc:
            return domain_error_response(exc)
        return Response(CompanySerializer(company).data)

    @extend_schema(request=CompanyWriteSerializer, responses={201: CompanySerializer})
    def create(self, request):
        command = CompanyWriteSerializer(data=request.data)
        command.is_valid(raise_exception=True)

        try:
            company = registry.create_company(
                name=command.validated_data.get("name"),
                slug=command.validated_data.get("slug"),
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(CompanySerializer(company).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=CompanyWriteSerializer, responses={200: CompanySerializer})
    def update(self, request, pk=None):
        command = CompanyWriteSerializer(data=request.data)
        command.is_valid(raise_exception=True)

        try:
            company = registry.update_company(
                company_id=pk,
                name=command.validated_data.get("name"),
                slug=command.validated_data.get("slug"),
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(CompanySerializer(company).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            deleted = registry.delete_company(company_id=pk)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response({"deleted": deleted}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path=r"by-slug/(?P<slug>[^/]+)")
    def by_slug(self, request, slug=None):
        try:
            company = registry.get_company_by_slug(slug)
        except FuelTrackerError as exc:
            return domain_error_response(exc)
        return Response(CompanySerializer(company).data)
