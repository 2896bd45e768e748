"""Bluesky use cases."""

from elonara.application.usecase.bluesky.followers import (
    FollowerItem,
    ListFollowersRequest,
    ListFollowersResponse,
    ListFollowersUseCase,
    SyncFollowersRequest,
    SyncFollowersResponse,
    SyncFollowersUseCase,
)

__all__ = [
    "FollowerItem",
    "ListFollowersRequest",
    "ListFollowersResponse",
    "ListFollowersUseCase",
    "SyncFollowersRequest",
    "SyncFollowersResponse",
    "SyncFollowersUseCase",
]
