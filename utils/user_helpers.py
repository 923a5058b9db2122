"""Утилиты для преобразования моделей в схемы Pydantic."""
from collections.abc import Iterable
from typing import List

from models.match import Match
from models.message import Message
from models.user import User
from schemas.match import MatchRead
from schemas.message import MessageRead
from schemas.user import CandidateRead


def game_name(user: User):
    return user.game.name if user.game is not None else None


def to_candidate_read(user: User) -> CandidateRead:
    """Сконвертировать модель пользователя в карточку ленты."""
    return CandidateRead(
        id=user.id,
        username=user.username,
        rank_tier=user.rank_tier,
        role=user.role,
        game_name=game_name(user),
        bio=user.bio,
        avatar_ref=user.avatar_url,
    )


def to_candidate_reads(users: Iterable[User]) -> List[CandidateRead]:
    return [to_candidate_read(user) for user in users]


def to_match_read(match: Match, other: User) -> MatchRead:
    return MatchRead(
        match_id=match.id,
        match_key=match.key,
        other_user_id=other.id,
        username=other.username,
        game_name=game_name(other),
        rank_tier=other.rank_tier,
        role=other.role,
        avatar_ref=other.avatar_url,
        created_at=match.created_at,
    )


def to_message_read(message: Message, conversation_key: str) -> MessageRead:
    return MessageRead(
        id=message.id,
        conversation_key=conversation_key,
        sender_id=message.sender_id,
        body=message.body,
        sequence=message.sequence,
        created_at=message.created_at,
    )
