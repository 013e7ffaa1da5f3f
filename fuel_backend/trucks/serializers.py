# trucks/serializers.py

"""
TRUCK SERIALIZERS

- TruckSerializer: read model (exposes derived `loaded` and `category`)
- *Command serializers: request shape only; business rules live in services
- TruckSnapshotSerializer: one truck row of a backup payload (verbatim fields)
"""

from decimal import Decimal

from rest_framework import serializers

from trucks.models import Truck, TruckStatus


class TruckSerializer(serializers.ModelSerializer):
    loaded = serializers.BooleanField(read_only=True)
    category = serializers.CharField(read_only=True)

    class Meta:
        model = Truck
        fields = [
            "id",
            "company",
            "truck_trailer",
            "product",
            "category",
            "transporter",
            "quantity",
            "driver_name",
            "id_number",
            "phone_number",
            "destination",
            "loading_point",
            "status",
            "permit_no",
            "permit_date",
            "loaded",
            "at20",
            "lo_company",
            "loading_date",
            "bol_no",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TruckInputSerializer(serializers.Serializer):
    truck_trailer = serializers.CharField(required=False, allow_blank=True)
    product = serializers.CharField(required=False, allow_blank=True)
    transporter = serializers.CharField(required=False, allow_blank=True)
    quantity = serializers.CharField(required=False, allow_blank=True)
    driver_name = serializers.CharField(required=False, allow_blank=True)
    id_number = serializers.CharField(required=False, allow_blank=True)
    phone_number = serializers.CharField(required=False, allow_blank=True)
    destination = serializers.CharField(required=False, allow_blank=True)
    loading_point = serializers.CharField(required=False, allow_blank=True)


class TruckCreateCommandSerializer(TruckInputSerializer):
    company = serializers.IntegerField(required=False, allow_null=True)


class TruckImportCommandSerializer(serializers.Serializer):
    company = serializers.IntegerField(required=False, allow_null=True)
    trucks = serializers.ListField(child=serializers.DictField(), allow_empty=True)


class GeneratePermitCommandSerializer(serializers.Serializer):
    permit_no = serializers.CharField(required=False, allow_blank=True, default="")
    permit_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    company = serializers.IntegerField(required=False, allow_null=True)


class LoadingCommandSerializer(serializers.Serializer):
    at20 = serializers.CharField()
    lo_company = serializers.CharField()
    loading_date = serializers.CharField()
    bol_no = serializers.CharField()


class ClearTrucksCommandSerializer(serializers.Serializer):
    company = serializers.IntegerField(required=False, allow_null=True)


class DuplicateTrailersQuerySerializer(serializers.Serializer):
    company = serializers.IntegerField(required=False, allow_null=True)
    trailers = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        allow_empty=True,
    )


class TruckSnapshotSerializer(serializers.Serializer):
    """
    A truck row as stored in a backup. Restored verbatim: no unit inference,
    no status re-derivation.
    """

    truck_trailer = serializers.CharField(max_length=128)
    product = serializers.CharField(max_length=64)
    transporter = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    driver_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    id_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    phone_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    destination = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    loading_point = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    status = serializers.ChoiceField(
        choices=TruckStatus.choices,
        required=False,
        allow_blank=True,
        allow_null=True,
        default=TruckStatus.PENDING,
    )
    permit_no = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    permit_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    at20 = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        required=False,
        allow_null=True,
        default=None,
    )
    lo_company = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    loading_date = serializers.DateField(required=False, allow_null=True, default=None)
    bol_no = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    created_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
    updated_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
