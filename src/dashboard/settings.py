"""Settings for the Streamlit dashboard."""
from typing import Literal

from pydantic import BaseModel, Field


class DashboardSettings(BaseModel):
    """Configuration for the dashboard."""

    page_size: int = Field(default=20, gt=0, le=200)
    max_notices: int = Field(default=50, gt=0)
    notices_displayed: int = Field(default=3, gt=0, le=20)
    theme: Literal["light", "dark"] = "dark"
