"""Language listing router."""

from fastapi import APIRouter, Depends

from ..catalog import language_info
from ..config import settings
from ..dependencies.services import get_translation_service
from ..models import LanguageEntry, LanguagesResponse
from ..services.translations import TranslationService

router = APIRouter(prefix="/languages", tags=["languages"])


@router.get("", response_model=LanguagesResponse)
async def list_languages(
    service: TranslationService = Depends(get_translation_service),
) -> LanguagesResponse:
    """
    List the languages that have at least one translation.

    Example:
        ```bash
        curl http://localhost:8000/languages
        ```

        Response:
        ```json
        {
          "default": "en",
          "languages": [
            {"code": "en", "name": "English", "native_name": "English", "default": true},
            {"code": "fr", "name": "French", "native_name": "Français", "default": false}
          ]
        }
        ```
    """
    entries = []
    for code in await service.list_languages():
        info = language_info(code)
        entries.append(
            LanguageEntry(
                code=info.code,
                name=info.name,
                native_name=info.native_name,
                default=code == settings.DEFAULT_LANGUAGE,
            )
        )
    return LanguagesResponse(default=settings.DEFAULT_LANGUAGE, languages=entries)
