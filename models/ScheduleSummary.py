from pydantic import BaseModel, ConfigDict, Field


class ColorTotal(BaseModel):
    color: str
    hours: float
    label: str


class ScheduleSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    by_color: dict[str, float] = Field(default_factory=dict, alias="byColor")
    total: float = 0.0
    total_label: str = Field("0m", alias="totalLabel")
    entries: list[ColorTotal] = Field(default_factory=list)
