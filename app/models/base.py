from datetime import date, datetime, timezone
from typing import Any
from bson.objectid import ObjectId
from mongoengine import Document, DateTimeField
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseDocumentMixin:
    # Fields never serialized to clients
    private_fields: tuple[str, ...] = ()

    def _sanitize_value(self, value: Any) -> Any:
        if isinstance(value, Document):
            return str(value.id)
        if isinstance(value, list):
            return [self._sanitize_value(v) for v in value]
        if isinstance(value, dict):
            return {k: self._sanitize_value(v) for k, v in value.items()}
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, ObjectId):
            return str(value)
        return value

    def to_output(self, fields=None, exclude=None):
        data: dict[str, Any] = {}
        exclude = set(exclude or []) | set(self.private_fields)
        fields = fields or self._fields.keys()

        for field in fields:
            if field in exclude or field == "id":
                continue
            value = getattr(self, field)
            data[to_camel(field)] = self._sanitize_value(value)

        data["id"] = str(self.id)
        return data


class BaseDocument(Document, BaseDocumentMixin):
    created_at = DateTimeField(default=utcnow, null=False)
    updated_at = DateTimeField(default=utcnow, null=False)

    meta = {
        "abstract": True,
    }

    def save(self, *args, **kwargs):
        self.updated_at = utcnow()
        return super().save(*args, **kwargs)
