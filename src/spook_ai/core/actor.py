"""Entity model for the protagonist and evader agents."""

from __future__ import annotations

import logging

from spook_ai.core.ports import BodyPort, HealthPort
from spook_ai.errors import MissingCollaboratorError
from spook_ai.runtime import ZERO, Vec2

LOGGER = logging.getLogger("spook_ai.agent")


class Actor:
    """A placeable entity the training area spawns, resets and deactivates."""

    def __init__(self, actor_id: str, body: BodyPort | None, health: HealthPort | None = None):
        if body is None:
            LOGGER.error("%s: missing body collaborator", actor_id)
            raise MissingCollaboratorError(f"Actor '{actor_id}' requires a body")
        self.actor_id = str(actor_id)
        self.body = body
        self.health = health
        self.is_active = True

    @property
    def position(self) -> Vec2:
        return self.body.position()

    def place(self, position: Vec2) -> None:
        self.body.place(position)

    def reset_state(self) -> None:
        """Revive, stop and re-enable the entity before a new episode."""
        if self.health is not None:
            self.health.revive()
        self.body.set_movement(ZERO)
        self.is_active = True

    def deactivate(self) -> None:
        self.body.set_movement(ZERO)
        self.is_active = False
