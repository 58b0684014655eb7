"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI
from supabase import create_client

from meal_ledger.adapters.openai_structuring_client import OpenAIStructuringClient
from meal_ledger.adapters.openai_transcription_client import (
    OpenAITranscriptionClient,
)
from meal_ledger.adapters.supabase_auth_client import SupabaseAuthClient
from meal_ledger.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_ledger.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from meal_ledger.adapters.supabase_stats_repository import SupabaseStatsRepository
from meal_ledger.config import Settings
from meal_ledger.services.auth import AuthService
from meal_ledger.services.meals import MealLedgerService
from meal_ledger.services.normalization import NormalizationService
from meal_ledger.services.profiles import ProfileService
from meal_ledger.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    normalization_service: NormalizationService
    meal_ledger_service: MealLedgerService
    stats_service: StatsService
    profile_service: ProfileService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    openai_client = (
        AsyncOpenAI(api_key=resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    normalization_service = NormalizationService(
        transcription_client=(
            OpenAITranscriptionClient(client=openai_client) if openai_client else None
        ),
        structuring_client=(
            OpenAIStructuringClient(client=openai_client) if openai_client else None
        ),
        transcription_model=resolved_settings.openai_transcription_model,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
    )
    auth_service = AuthService(
        client=SupabaseAuthClient(supabase_client),
        api_key=resolved_settings.supabase_anon_key,
    )
    meal_ledger_service = MealLedgerService(SupabaseMealRepository(supabase_client))
    stats_service = StatsService(SupabaseStatsRepository(supabase_client))
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        normalization_service=normalization_service,
        meal_ledger_service=meal_ledger_service,
        stats_service=stats_service,
        profile_service=profile_service,
        close_resources=close_resources,
    )
