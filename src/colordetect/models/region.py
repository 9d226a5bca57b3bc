from pydantic import BaseModel, computed_field

from .color import Color


class Region(BaseModel):
    """Bounding box of color-similar sample blocks grown from a seed point."""

    left: int
    top: int
    right: int
    bottom: int
    ref_color: Color
    color: Color
    weight: int  # matched sample blocks, not pixels
    diff: float  # distance between color and ref_color

    @computed_field  # type: ignore[prop-decorator]
    @property
    def width(self) -> int:
        return self.right - self.left

    @computed_field  # type: ignore[prop-decorator]
    @property
    def height(self) -> int:
        return self.bottom - self.top

    def contains(self, x: int, y: int) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    @classmethod
    def from_blocks(
        cls,
        left: int,
        top: int,
        right: int,
        bottom: int,
        ref_color: Color,
        colors: list[Color],
    ) -> "Region":
        """Build a region from the averaged colors of its matched blocks."""
        color = Color.average(colors)
        return cls(
            left=left,
            top=top,
            right=right,
            bottom=bottom,
            ref_color=ref_color,
            color=color,
            weight=len(colors),
            diff=color.diff(ref_color),
        )
