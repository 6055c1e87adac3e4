# fantasy_exchange/common/styled_tables.py
"""
HTML table renderer for Streamlit.

Provides `render_styled_table()` which converts a DataFrame to an HTML table
with a navy header, zebra rows and optional green/red value scaling, plus
`build_styled_table_html()` for callers that only need the markup.
"""

import html
from typing import Callable, Dict, List, Optional

import pandas as pd
import streamlit as st


# ---------------------------------------------------------------------------
# CSS (injected once per session)
# ---------------------------------------------------------------------------
_CSS_KEY = "_fx_tables_css_injected"

_TABLE_CSS = """
<style>
.fx-tbl-wrap {
    border: 1px solid #d6dde8;
    border-radius: 10px;
    overflow: hidden;
    margin-bottom: 1rem;
}
.fx-tbl-wrap.scroll {
    overflow-y: auto;
}
.fx-tbl-title {
    background: #0f2a4a;
    color: #ffffff;
    font-weight: 700;
    font-size: 1.05rem;
    padding: 10px 16px;
    margin: 0;
}
table.fx-tbl {
    width: 100%;
    border-collapse: collapse;
    font-size: 14px;
}
table.fx-tbl thead th {
    background: #16365c;
    color: #ffffff;
    font-weight: 600;
    font-size: 13px;
    padding: 9px 12px;
    position: sticky;
    top: 0;
}
table.fx-tbl tbody td {
    padding: 7px 12px;
    border-bottom: 1px solid #e6ebf2;
}
table.fx-tbl tbody tr:nth-child(even) {
    background: rgba(22,54,92,0.04);
}
table.fx-tbl tbody tr.highlight-row {
    border-left: 3px solid #2563eb;
    background: rgba(37,99,235,0.08);
}
</style>
"""


def _inject_css():
    if not st.session_state.get(_CSS_KEY):
        st.markdown(_TABLE_CSS, unsafe_allow_html=True)
        st.session_state[_CSS_KEY] = True


def _color_scale(val, col_min, col_max, direction="positive"):
    """
    Inline CSS color for a numeric value, red at the bad end and green at the good end.

    direction='negative' flips the scale (lower is better).
    """
    if pd.isna(val) or pd.isna(col_min) or pd.isna(col_max) or col_max == col_min:
        return ""
    ratio = (val - col_min) / (col_max - col_min)
    if direction == "negative":
        ratio = 1 - ratio
    r = int(200 - 150 * ratio)
    g = int(60 + 110 * ratio)
    return f"color: rgb({r},{g},60); font-weight: 600;"


def _format_value(val, fmt: Optional[str]) -> str:
    if val is None or (not isinstance(val, str) and pd.isna(val)):
        return ""
    if fmt:
        try:
            return fmt.format(val)
        except (ValueError, TypeError):
            pass
    if isinstance(val, float):
        return f"{val:g}"
    return html.escape(str(val))


def build_styled_table_html(
    df: pd.DataFrame,
    title: str = None,
    col_formats: Dict[str, str] = None,
    text_align: Dict[str, str] = None,
    highlight_row: Callable = None,
    positive_color_cols: List[str] = None,
    negative_color_cols: List[str] = None,
    max_height: int = None,
) -> str:
    col_formats = col_formats or {}
    text_align = text_align or {}
    positive_color_cols = positive_color_cols or []
    negative_color_cols = negative_color_cols or []

    color_ranges = {}
    for col in positive_color_cols + negative_color_cols:
        if col in df.columns:
            numeric_vals = pd.to_numeric(df[col], errors="coerce")
            color_ranges[col] = (numeric_vals.min(), numeric_vals.max())

    def _align(col):
        if col in text_align:
            return text_align[col]
        return "right" if df[col].dtype.kind in ("i", "f", "u") else "left"

    scroll_class = " scroll" if max_height else ""
    max_h_style = f"max-height:{max_height}px;" if max_height else ""
    parts = [f'<div class="fx-tbl-wrap{scroll_class}" style="{max_h_style}">']
    if title:
        parts.append(f'<div class="fx-tbl-title">{html.escape(title)}</div>')

    parts.append('<table class="fx-tbl"><thead><tr>')
    for col in df.columns:
        parts.append(f'<th style="text-align:{_align(col)};">{html.escape(str(col))}</th>')
    parts.append("</tr></thead><tbody>")

    for _, row in df.iterrows():
        row_class = ' class="highlight-row"' if highlight_row and highlight_row(row) else ""
        parts.append(f"<tr{row_class}>")
        for col in df.columns:
            val = row[col]
            extra_style = ""
            if col in color_ranges:
                numeric = pd.to_numeric(val, errors="coerce")
                if pd.notna(numeric):
                    direction = "positive" if col in positive_color_cols else "negative"
                    cmin, cmax = color_ranges[col]
                    extra_style = _color_scale(float(numeric), cmin, cmax, direction)
            parts.append(
                f'<td style="text-align:{_align(col)};{extra_style}">'
                f'{_format_value(val, col_formats.get(col))}</td>'
            )
        parts.append("</tr>")

    parts.append("</tbody></table></div>")
    return "".join(parts)


def render_styled_table(df: pd.DataFrame, title: str = None, **kwargs):
    """
    Render a DataFrame as an HTML table via st.markdown.

    Parameters
    ----------
    df : DataFrame to display.
    title : Optional header rendered above the table inside the wrapper.
    col_formats : {col: format_spec}, e.g. {"PF": "{:,.2f}"}.
    text_align : {col: "left"|"center"|"right"}; numeric columns default right.
    highlight_row : fn(row) -> bool. Matching rows get an accent border.
    positive_color_cols : Columns where higher values are greener.
    negative_color_cols : Columns where higher values are redder.
    max_height : Optional max-height in px (enables vertical scroll).
    """
    _inject_css()
    if df is None or df.empty:
        st.info("No data to display.")
        return
    st.markdown(build_styled_table_html(df, title=title, **kwargs), unsafe_allow_html=True)
