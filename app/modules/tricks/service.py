from supabase import Client
from app.config.tricks_config import (
    COMMON_ITEMS, CREATED_BY_ME_FILTER, DEFAULT_INSTRUCTIONS, DIFFICULTIES,
    SAMPLE_MAGIC_TRICKS, SAMPLE_TRICK_OWNER
)
from app.modules.tricks.claude_client import ClaudeClient, ClaudeError
from app.modules.tricks.prompts import build_user_message
from app.modules.tricks.schemas import (
    MagicTrickCreate, MagicTrickUpdate, MagicTrickResponse, MagicTrickWithUserResponse,
    MagicTrickListResponse, GeneratedTrick, TrickGenerationRequest, TrickGenerationResponse
)
from app.modules.tricks.trick_parser import parse_generated_trick
from typing import List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = "Claude API key not configured. Please add CLAUDE_API_KEY to your environment variables."


def parse_instructions(text: str) -> List[str]:
    """One step per non-blank line; the default step when there are none"""
    steps = [line.strip() for line in text.split("\n") if line.strip()]
    return steps or list(DEFAULT_INSTRUCTIONS)


def sample_tricks() -> List[MagicTrickResponse]:
    now = datetime.now(timezone.utc)
    return [
        MagicTrickResponse(
            **trick, user_id=SAMPLE_TRICK_OWNER, created_at=now, updated_at=now, created_by_me=False
        )
        for trick in SAMPLE_MAGIC_TRICKS
    ]


class TrickService:
    def __init__(self, supabase: Client, claude: Optional[ClaudeClient] = None):
        self.supabase = supabase
        self.claude = claude or ClaudeClient()

    def _with_ownership(self, row: dict, current_user_id: str) -> MagicTrickResponse:
        return MagicTrickResponse(**row, created_by_me=row.get("user_id") == current_user_id)

    def list_tricks(self, current_user_id: str, trick_filter: Optional[str] = None) -> MagicTrickListResponse:
        """All tricks, newest first, each flagged with ownership.

        trick_filter: a difficulty, or "Created by me". A failed load falls back to the sample tricks.
        """
        try:
            result = self.supabase.table("magic_tricks")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            tricks = [self._with_ownership(row, current_user_id) for row in result.data or []]
            error = None
        except Exception as e:
            logger.error(f"Error loading tricks: {e}")
            tricks = sample_tricks()
            error = "Failed to load magic tricks. Please try again."

        if trick_filter == CREATED_BY_ME_FILTER:
            tricks = [t for t in tricks if t.created_by_me]
        elif trick_filter in DIFFICULTIES:
            tricks = [t for t in tricks if t.difficulty == trick_filter]
        return MagicTrickListResponse(tricks=tricks, error=error)

    def list_tricks_with_users(self, current_user_id: str) -> List[MagicTrickWithUserResponse]:
        try:
            result = self.supabase.table("magic_tricks_with_users")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading tricks with users: {e}")
            raise HTTPException(status_code=502, detail="Failed to load magic tricks. Please try again.")
        return [
            MagicTrickWithUserResponse(**row, created_by_me=row.get("user_id") == current_user_id)
            for row in result.data or []
        ]

    def get_trick(self, trick_id: str, current_user_id: str) -> MagicTrickResponse:
        try:
            result = self.supabase.table("magic_tricks")\
                .select("*")\
                .eq("id", trick_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error loading trick {trick_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to load magic trick")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Magic trick not found")
        return self._with_ownership(result.data, current_user_id)

    def _insert(self, row: dict, current_user_id: str, failure_message: str) -> MagicTrickResponse:
        try:
            result = self.supabase.table("magic_tricks").insert(row).execute()
        except Exception as e:
            logger.error(f"Error saving trick: {e}")
            raise HTTPException(status_code=502, detail=failure_message)
        if not result.data:
            raise HTTPException(status_code=502, detail=failure_message)
        return self._with_ownership(result.data[0], current_user_id)

    def add_trick(self, trick_data: MagicTrickCreate, user_id: str) -> MagicTrickResponse:
        """Add a hand-written trick owned by the current user"""
        return self._insert({
            "user_id": user_id,
            "title": trick_data.title,
            "description": trick_data.description,
            "instructions": parse_instructions(trick_data.instructions_text),
            "difficulty": trick_data.difficulty,
            "overall_rating": 0.0
        }, user_id, "Failed to save magic trick. Please try again.")

    def save_generated_trick(self, trick: GeneratedTrick, user_id: str) -> MagicTrickResponse:
        return self._insert({
            "user_id": user_id,
            "title": trick.title,
            "description": trick.description,
            "instructions": trick.instructions,
            "difficulty": trick.difficulty,
            "overall_rating": 0.0
        }, user_id, "Failed to save generated trick. Please try again.")

    def update_trick(self, trick_id: str, trick_data: MagicTrickUpdate, user_id: str) -> MagicTrickResponse:
        """Update a trick; RLS only lets the owner's row through, anything else is 404"""
        update_data = trick_data.model_dump(exclude_none=True)
        if not update_data:
            return self.get_trick(trick_id, user_id)
        try:
            result = self.supabase.table("magic_tricks")\
                .update(update_data)\
                .eq("id", trick_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating trick {trick_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to update magic trick")
        if not result.data:
            raise HTTPException(status_code=404, detail="Magic trick not found")
        return self._with_ownership(result.data[0], user_id)

    def delete_trick(self, trick_id: str) -> None:
        try:
            result = self.supabase.table("magic_tricks")\
                .delete()\
                .eq("id", trick_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting trick {trick_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to delete magic trick")
        if not result.data:
            raise HTTPException(status_code=404, detail="Magic trick not found")

    def generate_trick(self, request: TrickGenerationRequest) -> TrickGenerationResponse:
        """Ask Claude for a trick built from the given items"""
        if not request.items:
            raise HTTPException(status_code=400, detail="Please select at least one item for the trick")
        if not self.claude.is_configured:
            return TrickGenerationResponse(success=False, error=NOT_CONFIGURED_ERROR)

        try:
            content = self.claude.complete(build_user_message(request))
        except ClaudeError as e:
            logger.error(f"Claude API error: {e}")
            return TrickGenerationResponse(success=False, error=str(e))

        return TrickGenerationResponse(success=True, trick=parse_generated_trick(content, request.items))

    @staticmethod
    def common_items() -> List[str]:
        return list(COMMON_ITEMS)
