"""
Pydantic models for lazykv.

Source kinds resolved by the adapter, validated parameters for the
windowed and generated operators, and the engine settings.
"""

import logging
from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator, model_validator
from enum import Enum


class SourceKind(str, Enum):
    """What the adapter decided an input is"""
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    ARRAY = "array"
    STREAM = "stream"
    ITERABLE = "iterable"
    SCALAR = "scalar"


class SliceParams(BaseModel):
    """Window bounds for slice()"""
    start: int = Field(
        0,
        description="Index of the first item to yield",
        ge=0
    )
    stop: int = Field(
        -1,
        description="Index to stop before; -1 means unbounded",
        ge=-1
    )

    @property
    def unbounded(self) -> bool:
        return self.stop == -1


class CountParams(BaseModel):
    """A non-negative item count (take, drop, drop_last)"""
    count: int = Field(
        ...,
        description="Number of items",
        ge=0
    )


class FlattenParams(BaseModel):
    """Nesting depth for flatten()"""
    depth: int = Field(
        -1,
        description="Levels to inline; -1 flattens everything",
        ge=-1
    )


class TakeNthParams(BaseModel):
    """Stride for take_nth()"""
    step: int = Field(
        ...,
        description="Yield every step-th item",
        ge=1
    )


class RepeatParams(BaseModel):
    """Repetition count for repeat()"""
    times: int = Field(
        -1,
        description="How many times to yield the value; negative means forever"
    )

    @property
    def infinite(self) -> bool:
        return self.times < 0


class PartitionParams(BaseModel):
    """Window geometry for partition()"""
    size: int = Field(
        ...,
        description="Number of items in a full window",
        ge=1
    )
    step: Optional[int] = Field(
        None,
        description="Distance between window starts; defaults to size",
        ge=1
    )

    @model_validator(mode="after")
    def default_step(self):
        """Non-overlapping windows unless a step is given"""
        if self.step is None:
            self.step = self.size
        return self


class RangeParams(BaseModel):
    """Bounds of a generated numeric range"""
    start: Union[int, float] = Field(0, description="First value")
    end: Optional[Union[int, float]] = Field(
        None,
        description="Last value allowed (inclusive); None means infinite"
    )
    step: Union[int, float] = Field(1, description="Increment between values")

    @field_validator('step')
    @classmethod
    def validate_step(cls, v):
        """A zero step would never reach the end"""
        if v == 0:
            raise ValueError("Range step must not be zero")
        return v

    def crosses_end(self, value) -> bool:
        """Whether value lies beyond the end in the direction of travel"""
        if self.end is None:
            return False
        if self.step > 0:
            return value > self.end
        return value < self.end


class EngineSettings(BaseModel):
    """Runtime settings for the engine"""
    log_level: str = Field(
        "WARNING",
        description="Logging level name applied by configure()"
    )
    shuffle_seed: Optional[int] = Field(
        None,
        description="Seed for shuffle(); None uses fresh randomness"
    )
    strict_cycle: bool = Field(
        False,
        description="Reject one-shot input to cycle() instead of degrading to one pass"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Accept any standard logging level name, case-insensitive"""
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level
