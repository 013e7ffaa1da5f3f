# allocations/views.py

"""
ALLOCATION LEDGER API

POST /allocations/         full reset: initial == remaining == initial_volume
POST /allocations/adjust/  change target, keep consumed volume
POST /allocations/check/   advisory availability check
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from allocations.serializers import (
    AllocationSerializer,
    AllocationTargetSerializer,
    AvailabilityQuerySerializer,
    AvailabilitySerializer,
)
from allocations.services import ledger
from common.api import domain_error_response, parse_company_param
from common.exceptions import FuelTrackerError
from companies.services.registry import resolve_company


class AllocationViewSet(viewsets.ViewSet):
    serializer_class = AllocationSerializer

    def list(self, request):
        try:
            company_id = parse_company_param(request)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        allocations = ledger.list_allocations(company_id=company_id)
        return Response(AllocationSerializer(allocations, many=True).data)

    @extend_schema(request=AllocationTargetSerializer, responses={201: AllocationSerializer})
    def create(self, request):
        command = AllocationTargetSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            company = resolve_company(data.get("company"))
            allocation = ledger.reset_allocation(
                company_id=company.id,
                category=data["product_type"],
                initial_volume=data["initial_volume"],
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(AllocationSerializer(allocation).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AllocationTargetSerializer, responses={200: AllocationSerializer})
    @action(detail=False, methods=["post"], url_path="adjust")
    def adjust(self, request):
        command = AllocationTargetSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            company = resolve_company(data.get("company"))
            allocation = ledger.adjust_allocation(
                company_id=company.id,
                category=data["product_type"],
                initial_volume=data["initial_volume"],
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(AllocationSerializer(allocation).data)

    @extend_schema(request=AvailabilityQuerySerializer, responses={200: AvailabilitySerializer})
    @action(detail=False, methods=["post"], url_path="check")
    def check_availability(self, request):
        query = AvailabilityQuerySerializer(data=request.data)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        try:
            company = resolve_company(data.get("company"))
            availability = ledger.check_available(
                company_id=company.id,
                category=data["product_type"],
                volume=data["volume"],
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(
            AvailabilitySerializer(
                {"available": availability.available, "remaining": availability.remaining}
            ).data
        )
