"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import HAND_SIZE, MAX_PLAYERS, MIN_PLAYERS


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    min_players: int = Field(
        default=MIN_PLAYERS,
        ge=2,
        le=4,
        description="Minimum number of seated players required to start"
    )
    max_players: int = Field(
        default=MAX_PLAYERS,
        ge=2,
        le=4,
        description="Maximum number of seated (non-spectator) players"
    )
    hand_size: int = Field(
        default=HAND_SIZE,
        ge=1,
        le=13,
        description="Cards dealt to each seated player"
    )
    auto_start: bool = Field(
        default=False,
        description="Start as soon as enough players are seated and restart once everyone is ready"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't fall below minimum."""
        min_players = info.data.get('min_players', MIN_PLAYERS)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def can_start_with(self, player_count: int) -> bool:
        """Check if a seated player count is enough to deal."""
        return self.min_players <= player_count <= self.max_players


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
