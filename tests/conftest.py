from __future__ import annotations

import polars as pl
import pytest

from streamgraph.ingest import parse_csv_text

SCENARIO_CSV = (
    "Date,GPT-4,Gemini,PaLM-2,Claude,LLaMA-3.1\n"
    "1/1/24,10,20,5,15,8\n"
    "2/1/24,12,18,6,14,9\n"
)


@pytest.fixture
def scenario_df() -> pl.DataFrame:
    return parse_csv_text(SCENARIO_CSV)
