"""API Dependencies — hand the lifespan-built provider and notifier to routes.

Invariants:
    - Routes never construct storage, matcher or notifier themselves
    - Missing wiring is a startup bug: RuntimeError, never a silent default

Design Decisions:
    - Read from app.state (set in lifespan) so tests override with
      app.dependency_overrides, same as any FastAPI dependency
"""

from fastapi import Request

from pet_provider.infrastructure.change_notifier import ChangeNotifier
from pet_provider.services.pet_provider import PetProvider


def get_provider(request: Request) -> PetProvider:
    provider = getattr(request.app.state, "provider", None)
    if provider is None:
        raise RuntimeError("Pet provider not initialized")
    return provider


def get_notifier(request: Request) -> ChangeNotifier:
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is None:
        raise RuntimeError("Change notifier not initialized")
    return notifier
