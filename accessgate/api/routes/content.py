from fastapi import APIRouter, Depends

from accessgate.api.deps import get_access_resolver, get_metadata_resolver
from accessgate.content.ids import from_content_id
from accessgate.content.metadata import ContentDescriptor, MetadataResolver
from accessgate.core.config import settings
from accessgate.core.errors import ValidationError
from accessgate.paywall.access import AccessResolver
from accessgate.utils.currency import format_units


router = APIRouter(prefix="/content", tags=["content"])


@router.get("/{content_id}")
def get_content(
    content_id: str,
    resolver: AccessResolver = Depends(get_access_resolver),
) -> dict:
    """Settlement contract entry for a content item (string or bytes32 id)."""
    record = resolver.get_content(content_id)
    try:
        label = from_content_id(record.content_id)
    except ValidationError:
        label = None
    return {
        "content_id": record.content_id,
        "label": label,
        "creator": record.creator,
        "price": record.price,
        "price_formatted": format_units(record.price, settings.token_decimals),
        "storage_pointer": record.storage_pointer,
        "is_active": record.is_active,
        "created_at": record.created_at,
    }


@router.get("/{cid}/metadata", response_model=ContentDescriptor, response_model_by_alias=True)
def get_content_metadata(
    cid: str,
    metadata: MetadataResolver = Depends(get_metadata_resolver),
) -> ContentDescriptor:
    return metadata.resolve(cid)
