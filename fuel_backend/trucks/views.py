# trucks/views.py

"""
TRUCK RECORD STORE API

CRUD:
- GET    /trucks/?company=&status=
- POST   /trucks/                      single insert (unit inference applies)
- GET    /trucks/<id>/
- PATCH  /trucks/<id>/                 direct edit (no ledger reconciliation)
- DELETE /trucks/<id>/

Lifecycle:
- POST /trucks/<id>/generate-permit/
- POST /trucks/<id>/loading/
- POST /trucks/<id>/cancel/
- POST /trucks/<id>/restore/

Bulk + reads:
- POST /trucks/import/                 replace ALL trucks of a company
- POST /trucks/clear/
- POST /trucks/duplicates/
- GET  /trucks/stats/?company=
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.api import domain_error_response, parse_company_param
from common.exceptions import FuelTrackerError, InvalidInputError
from companies.services.registry import resolve_company
from trucks.filters import TruckFilter
from trucks.models import Truck
from trucks.serializers import (
    ClearTrucksCommandSerializer,
    DuplicateTrailersQuerySerializer,
    GeneratePermitCommandSerializer,
    LoadingCommandSerializer,
    TruckCreateCommandSerializer,
    TruckImportCommandSerializer,
    TruckSerializer,
)
from trucks.services import permit_service, stats_service, truck_service

# Keys clients echo back from the read model; never patchable
READ_ONLY_KEYS = {"id", "company", "category", "loaded", "created_at", "updated_at"}


class TruckViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Truck.objects.select_related("company").order_by("id")
    serializer_class = TruckSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = TruckFilter

    # --------------------------------------------------
    # CRUD
    # --------------------------------------------------

    @extend_schema(request=TruckCreateCommandSerializer, responses={201: TruckSerializer})
    def create(self, request):
        command = TruckCreateCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = dict(command.validated_data)
        company_id = data.pop("company", None)

        try:
            truck = truck_service.insert_truck(data=data, company_id=company_id)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(TruckSerializer(truck).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        if not isinstance(request.data, dict):
            return domain_error_response(InvalidInputError("Request body must be a JSON object"))

        patch = {k: v for k, v in request.data.items() if k not in READ_ONLY_KEYS}

        try:
            truck = truck_service.update_truck(truck_id=pk, patch=patch)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(TruckSerializer(truck).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            truck_service.delete_truck(truck_id=pk)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(status=status.HTTP_204_NO_CONTENT)

    # --------------------------------------------------
    # LIFECYCLE
    # --------------------------------------------------

    @extend_schema(request=GeneratePermitCommandSerializer, responses={200: TruckSerializer})
    @action(detail=True, methods=["post"], url_path="generate-permit")
    def generate_permit(self, request, pk=None):
        command = GeneratePermitCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            truck = permit_service.generate_permit(
                truck_id=pk,
                permit_no=data.get("permit_no", ""),
                permit_date=data.get("permit_date"),
                company_id=data.get("company"),
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(TruckSerializer(truck).data)

    @extend_schema(request=LoadingCommandSerializer, responses={200: TruckSerializer})
    @action(detail=True, methods=["post"], url_path="loading")
    def loading(self, request, pk=None):
        command = LoadingCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            truck = permit_service.mark_loaded(
                truck_id=pk,
                at20=data["at20"],
                lo_company=data["lo_company"],
                loading_date=data["loading_date"],
                bol_no=data["bol_no"],
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(TruckSerializer(truck).data)

    @extend_schema(request=None, responses={200: TruckSerializer})
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        try:
            truck = permit_service.cancel_truck(truck_id=pk)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(TruckSerializer(truck).data)

    @extend_schema(request=None, responses={200: TruckSerializer})
    @action(detail=True, methods=["post"], url_path="restore")
    def restore(self, request, pk=None):
        try:
            truck = permit_service.restore_truck(truck_id=pk)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(TruckSerializer(truck).data)

    # --------------------------------------------------
    # BULK
    # --------------------------------------------------

    @extend_schema(request=TruckImportCommandSerializer, responses={201: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["post"], url_path="import")
    def import_trucks(self, request):
        command = TruckImportCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            trucks = truck_service.bulk_replace_trucks(
                rows=data["trucks"],
                company_id=data.get("company"),
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response({"count": len(trucks)}, status=status.HTTP_201_CREATED)

    @extend_schema(request=ClearTrucksCommandSerializer, responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["post"], url_path="clear")
    def clear(self, request):
        command = ClearTrucksCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)

        try:
            deleted = truck_service.clear_trucks(
                company_id=command.validated_data.get("company"),
            )
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response({"deleted": deleted})

    @extend_schema(request=DuplicateTrailersQuerySerializer, responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["post"], url_path="duplicates")
    def duplicates(self, request):
        query = DuplicateTrailersQuerySerializer(data=request.data)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        try:
            company = resolve_company(data.get("company"))
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        duplicates = truck_service.find_duplicate_trailers(
            company_id=company.id,
            trailers=data["trailers"],
        )
        return Response({"duplicates": duplicates})

    @extend_schema(
        parameters=[OpenApiParameter("company", int, required=False)],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        try:
            company_id = parse_company_param(request)
        except FuelTrackerError as exc:
            return domain_error_response(exc)

        return Response(stats_service.compute_truck_stats(company_id=company_id))
