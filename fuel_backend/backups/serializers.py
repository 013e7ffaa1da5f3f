# backups/serializers.py

from rest_framework import serializers


class RestoreCommandSerializer(serializers.Serializer):
    company = serializers.IntegerField()
    data = serializers.DictField()


class RestoreResultSerializer(serializers.Serializer):
    trucks_restored = serializers.IntegerField()
    allocations_restored = serializers.IntegerField()
