"""Pydantic schemas for JSON data validation."""

from pydantic import BaseModel, Field, field_validator

from .constants import (
    CORRECT_BUZZ_POINTS,
    DEFAULT_BONUS_PART_VALUE,
    MAX_TEAMS,
    NEG_BUZZ_POINTS,
    SNAPSHOT_VERSION,
)


class PlayerSchema(BaseModel):
    """Player in a roster."""

    name: str = Field(..., min_length=1)
    team_name: str = Field(..., min_length=1)
    is_starter: bool = False

    class Config:
        extra = 'forbid'


class RosterFile(BaseModel):
    """Standalone roster file structure."""

    players: list[PlayerSchema]

    class Config:
        extra = 'forbid'


class TossupSchema(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str

    class Config:
        extra = 'forbid'


class BonusPartSchema(BaseModel):
    text: str
    answer: str
    value: int = Field(default=DEFAULT_BONUS_PART_VALUE, ge=0)

    class Config:
        extra = 'forbid'


class BonusSchema(BaseModel):
    leadin: str = ''
    parts: list[BonusPartSchema]

    @field_validator('parts')
    @classmethod
    def validate_parts(cls, v):
        """Ensure a bonus has at least one part."""
        if not v:
            raise ValueError('Bonus must have at least one part')
        return v

    class Config:
        extra = 'forbid'


class PacketSchema(BaseModel):
    """Packet as supplied by a loader."""

    tossups: list[TossupSchema] = Field(default_factory=list)
    bonuses: list[BonusSchema] = Field(default_factory=list)

    class Config:
        extra = 'forbid'


class BuzzMarkerSchema(BaseModel):
    player: PlayerSchema
    position: int = Field(..., ge=0)
    correct: bool

    class Config:
        extra = 'forbid'


class TossupAnswerEventSchema(BaseModel):
    marker: BuzzMarkerSchema
    tossup_index: int = Field(..., ge=0)

    class Config:
        extra = 'forbid'


class WrongBuzzSchema(TossupAnswerEventSchema):
    """Incorrect buzz; ``is_neg`` marks the team's penalised buzz."""

    is_neg: bool = False


class SubstitutionEventSchema(BaseModel):
    in_player: PlayerSchema
    out_player: PlayerSchema

    class Config:
        extra = 'forbid'


class PlayerJoinsEventSchema(BaseModel):
    in_player: PlayerSchema

    class Config:
        extra = 'forbid'


class PlayerLeavesEventSchema(BaseModel):
    out_player: PlayerSchema

    class Config:
        extra = 'forbid'


class ThrowOutQuestionEventSchema(BaseModel):
    question_index: int = Field(..., ge=0)

    class Config:
        extra = 'forbid'


class BonusAnswerPartSchema(BaseModel):
    index: int = Field(..., ge=0)
    points: int

    class Config:
        extra = 'forbid'


class BonusAnswerEventSchema(BaseModel):
    receiving_team: str = Field(..., min_length=1)
    correct_parts: list[BonusAnswerPartSchema] = Field(default_factory=list)

    class Config:
        extra = 'forbid'


class TossupProtestEventSchema(BaseModel):
    team_name: str = Field(..., min_length=1)
    question_index: int = Field(..., ge=0)
    position: int = Field(..., ge=0)
    reason: str = ''

    class Config:
        extra = 'forbid'


class BonusProtestEventSchema(BaseModel):
    team_name: str = Field(..., min_length=1)
    question_index: int = Field(..., ge=0)
    part: int = Field(..., ge=0)
    reason: str = ''

    class Config:
        extra = 'forbid'


class CycleSchema(BaseModel):
    """Every event recorded in one cycle."""

    subs: list[SubstitutionEventSchema] = Field(default_factory=list)
    player_joins: list[PlayerJoinsEventSchema] = Field(default_factory=list)
    player_leaves: list[PlayerLeavesEventSchema] = Field(default_factory=list)
    correct_buzz: TossupAnswerEventSchema | None = None
    incorrect_buzzes: list[WrongBuzzSchema] = Field(default_factory=list)
    thrown_out_tossups: list[ThrowOutQuestionEventSchema] = Field(default_factory=list)
    thrown_out_bonuses: list[ThrowOutQuestionEventSchema] = Field(default_factory=list)
    bonus_answer: BonusAnswerEventSchema | None = None
    tossup_protests: list[TossupProtestEventSchema] = Field(default_factory=list)
    bonus_protests: list[BonusProtestEventSchema] = Field(default_factory=list)

    @field_validator('correct_buzz')
    @classmethod
    def validate_correct_buzz(cls, v):
        """Ensure the correct buzz is actually marked correct."""
        if v is not None and not v.marker.correct:
            raise ValueError('correct_buzz marker must have correct=true')
        return v

    @field_validator('incorrect_buzzes')
    @classmethod
    def validate_incorrect_buzzes(cls, v):
        """Ensure wrong buzzes are wrong and each team has at most one neg."""
        neg_teams = set()
        for buzz in v:
            if buzz.marker.correct:
                raise ValueError('incorrect_buzzes may not contain correct buzzes')
            if buzz.is_neg:
                team = buzz.marker.player.team_name
                if team in neg_teams:
                    raise ValueError(f'More than one neg for team {team}')
                neg_teams.add(team)
        return v

    class Config:
        extra = 'forbid'


class GameSnapshot(BaseModel):
    """Complete saved match: packet, roster and cycles."""

    version: int = SNAPSHOT_VERSION
    packet: PacketSchema = Field(default_factory=PacketSchema)
    players: list[PlayerSchema] = Field(default_factory=list)
    cycles: list[CycleSchema] = Field(default_factory=list)

    @field_validator('version')
    @classmethod
    def validate_version(cls, v):
        """Reject match files written in a format this version can't read."""
        if v != SNAPSHOT_VERSION:
            raise ValueError(f'Unsupported match file version {v} (expected {SNAPSHOT_VERSION})')
        return v

    class Config:
        extra = 'forbid'


class MatchConfig(BaseModel):
    """Match scoring settings."""

    correct_points: int = Field(default=CORRECT_BUZZ_POINTS, ge=0)
    neg_points: int = Field(default=NEG_BUZZ_POINTS, le=0)
    max_teams: int = Field(default=MAX_TEAMS, ge=2, le=2)

    class Config:
        extra = 'forbid'
