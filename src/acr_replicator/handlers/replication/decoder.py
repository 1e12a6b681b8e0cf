"""Container registry event decoding.

Turns an Event Grid event (raw text, bytes or an already parsed mapping)
into one of the replication event variants. Decoding checks structure only.
"""

__all__ = ["decode_event"]

import json
from typing import Any, Dict, Mapping, Union

import marshmallow as mm

from acr_replicator.common.exceptions import DecodeError
from acr_replicator.handlers.replication.model import (
    ImageDeleted,
    ImagePushed,
    ReplicationEvent,
    ReplicationEventType,
    UnrecognizedEvent,
)


class _ExcludeUnknownSchema(mm.Schema):
    class Meta:
        unknown = mm.EXCLUDE


class EventEnvelopeSchema(_ExcludeUnknownSchema):
    id = mm.fields.String(load_default=None)
    event_type = mm.fields.String(data_key="eventType", required=True)
    subject = mm.fields.String(load_default=None)
    data = mm.fields.Dict(required=True)


class EventRequestSchema(_ExcludeUnknownSchema):
    host = mm.fields.String(required=True, validate=mm.validate.Length(min=1))


class ImagePushedTargetSchema(_ExcludeUnknownSchema):
    repository = mm.fields.String(required=True, validate=mm.validate.Length(min=1))
    tag = mm.fields.String(required=True, validate=mm.validate.Length(min=1))


class ImageDeletedTargetSchema(_ExcludeUnknownSchema):
    repository = mm.fields.String(required=True, validate=mm.validate.Length(min=1))
    digest = mm.fields.String(required=True, validate=mm.validate.Length(min=1))


class ImagePushedDataSchema(_ExcludeUnknownSchema):
    target = mm.fields.Nested(ImagePushedTargetSchema, required=True)
    request = mm.fields.Nested(EventRequestSchema, required=True)


class ImageDeletedDataSchema(_ExcludeUnknownSchema):
    target = mm.fields.Nested(ImageDeletedTargetSchema, required=True)
    request = mm.fields.Nested(EventRequestSchema, required=True)


def _parse_raw_event(raw: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Event is not valid UTF-8: {e}") from e
    if not isinstance(raw, str) or not raw.strip():
        raise DecodeError("Received a null or empty event")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Event is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise DecodeError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def decode_event(raw: Union[str, bytes, Mapping[str, Any], None]) -> ReplicationEvent:
    """Decode a single container registry event.

    Args:
        raw: The event as delivered, in the Event Grid event schema.

    Returns:
        `ImagePushed`, `ImageDeleted`, or `UnrecognizedEvent` for any other
        well-formed event type.

    Raises:
        DecodeError: If the event is empty, is not a JSON object, lacks an
            event type or data, or a push/delete payload misses a field.
    """
    if raw is None:
        raise DecodeError("Received a null or empty event")
    try:
        envelope = EventEnvelopeSchema().load(_parse_raw_event(raw))
    except mm.ValidationError as e:
        raise DecodeError(f"Could not parse the event envelope: {e.messages}") from e

    event_type = ReplicationEventType.from_event_type(envelope["event_type"])
    try:
        if event_type == ReplicationEventType.IMAGE_PUSHED:
            data = ImagePushedDataSchema().load(envelope["data"])
            return ImagePushed(
                repository=data["target"]["repository"],
                tag=data["target"]["tag"],
                source_host=data["request"]["host"],
                event_id=envelope["id"],
            )
        if event_type == ReplicationEventType.IMAGE_DELETED:
            data = ImageDeletedDataSchema().load(envelope["data"])
            return ImageDeleted(
                repository=data["target"]["repository"],
                digest=data["target"]["digest"],
                source_host=data["request"]["host"],
                event_id=envelope["id"],
            )
    except mm.ValidationError as e:
        raise DecodeError(
            f"Could not parse the event to the {event_type.value} schema: {e.messages}"
        ) from e
    return UnrecognizedEvent(event_type=envelope["event_type"], event_id=envelope["id"])
