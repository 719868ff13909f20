"""Translation listing router."""

from fastapi import APIRouter, Depends, Query

from ..config import settings
from ..dependencies.services import get_translation_service
from ..models import TranslationEntry, TranslationsResponse
from ..services.translations import TranslationService

router = APIRouter(prefix="/translations", tags=["translations"])


@router.get("", response_model=TranslationsResponse)
async def list_translations(
    language: str | None = Query(None, description="Only translations in this language"),
    service: TranslationService = Depends(get_translation_service),
) -> TranslationsResponse:
    """
    List available translations, optionally filtered by language.

    An unknown language yields an empty list rather than a 404.

    Example:
        ```bash
        curl "http://localhost:8000/translations?language=fr"
        ```
    """
    translations = await service.list_translations(language or None)
    return TranslationsResponse(
        default=settings.DEFAULT_TRANSLATION,
        language=language or None,
        translations=[
            TranslationEntry(
                id=t.id,
                name=t.name,
                language=t.language,
                status=t.status,
                default=t.id == settings.DEFAULT_TRANSLATION,
            )
            for t in translations
        ],
    )
