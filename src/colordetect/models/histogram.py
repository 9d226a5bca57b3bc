from pydantic import BaseModel, Field


class ChannelRange(BaseModel):
    min: int = 0
    max: int = 255


class ChannelRanges(BaseModel):
    """Per-channel value band (detected signal band or remap target)."""

    red: ChannelRange = Field(default_factory=ChannelRange)
    green: ChannelRange = Field(default_factory=ChannelRange)
    blue: ChannelRange = Field(default_factory=ChannelRange)

    def channels(self) -> list[tuple[str, ChannelRange]]:
        return [("red", self.red), ("green", self.green), ("blue", self.blue)]


class HistogramTable(BaseModel):
    """
    256-bucket distributions of red, green, blue and grayscale.

    raw_* hold pixel counts; the plain series are the same counts scaled so
    the series' own peak bucket is 100.
    """

    red: list[float]
    green: list[float]
    blue: list[float]
    grayscale: list[float]
    raw_red: list[int]
    raw_green: list[int]
    raw_blue: list[int]
    raw_grayscale: list[int]

    @property
    def sampled_pixels(self) -> int:
        return sum(self.raw_red)

    def raw(self, channel: str) -> list[int]:
        return getattr(self, f"raw_{channel}")

