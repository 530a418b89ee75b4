from rest_framework import serializers


class VersionedRowSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    version = serializers.IntegerField(min_value=1)


def version_map(rows):
    """Turn [{id, version}, ...] into {id: version}, refusing repeated ids."""
    versions = {}
    for row in rows:
        if row["id"] in versions:
            raise serializers.ValidationError(f"Row {row['id']} is listed more than once.")
        versions[row["id"]] = row["version"]
    return versions
