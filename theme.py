import streamlit as st

THEMES = {
    "light": {
        "name": "Light",
        "background": "#F3F4F6",
        "cardBackground": "#FFFFFF",
        "textColor": "#1F2937",
        "secondaryTextColor": "#4B5563",
        "primaryColor": "#3B82F6",
        "secondaryColor": "#10B981",
        "accentColor": "#8B5CF6",
        "dangerColor": "#EF4444",
        "warningColor": "#F59E0B",
        "chartPrimary": "#8884d8",
        "chartSecondary": "#82ca9d",
        "chartAccent": "#ff7300",
        "chartPriority": "#3f51b5",
        "chartRisk": "#e91e63",
        "tableHeaderBg": "#F9FAFB",
        "tableBorder": "#E5E7EB",
    },
    "dark": {
        "name": "Dark",
        "background": "#1F2937",
        "cardBackground": "#374151",
        "textColor": "#F9FAFB",
        "secondaryTextColor": "#D1D5DB",
        "primaryColor": "#60A5FA",
        "secondaryColor": "#34D399",
        "accentColor": "#A78BFA",
        "dangerColor": "#F87171",
        "warningColor": "#FBBF24",
        "chartPrimary": "#A78BFA",
        "chartSecondary": "#34D399",
        "chartAccent": "#FBBF24",
        "chartPriority": "#60A5FA",
        "chartRisk": "#F87171",
        "tableHeaderBg": "#4B5563",
        "tableBorder": "#6B7280",
    },
    "blue-green": {
        "name": "Blue-Green",
        "background": "#E0F2F7",
        "cardBackground": "#FFFFFF",
        "textColor": "#2C3E50",
        "secondaryTextColor": "#5D6D7E",
        "primaryColor": "#3498DB",
        "secondaryColor": "#2ECC71",
        "accentColor": "#9B59B6",
        "dangerColor": "#E74C3C",
        "warningColor": "#F39C12",
        "chartPrimary": "#3498DB",
        "chartSecondary": "#2ECC71",
        "chartAccent": "#F39C12",
        "chartPriority": "#34495E",
        "chartRisk": "#E74C3C",
        "tableHeaderBg": "#ECF0F1",
        "tableBorder": "#BDC3C7",
    },
}
DEFAULT_THEME = "light"

PIE_COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#A28DFF", "#FF6384"]


def get_theme(name: str | None = None) -> dict:
    return THEMES.get(name or DEFAULT_THEME, THEMES[DEFAULT_THEME])


CSS = """
<style>
/* ============ Tokens ============ */
:root{
  --bg:__background__; --card:__cardBackground__; --line:__tableBorder__;
  --text:__textColor__; --muted:__secondaryTextColor__;
  --accent:__primaryColor__; --ok:__secondaryColor__; --bad:__dangerColor__; --warn:__warningColor__;
  --head:__tableHeaderBg__;
}
[data-testid="stAppViewContainer"], .main, [data-testid="stSidebar"]{ background:var(--bg); color:var(--text); }
.block-container{ padding-top:1.4rem!important; max-width:2000px!important; }
*{font-family:ui-sans-serif,system-ui,-apple-system,Segoe UI,Roboto,Arial}

/* ============ Cards ============ */
.card{
  background:var(--card); border:1px solid var(--line); border-radius:14px;
  padding:12px 14px; margin:6px 0; box-shadow:0 6px 16px rgba(0,0,0,.10);
  animation: fadeSlideUp .45s ease both;
}
.card .label{ font-size:.85rem; color:var(--muted); text-transform:uppercase; letter-spacing:.3px; }
.card .value{ font-size:1.55rem; font-weight:800; color:var(--text); }
.card .value.positive{ color:var(--ok); } .card .value.negative{ color:var(--bad); }
.card .sub{ font-size:.82rem; color:var(--muted); }
.chart-heading{ font-size:17px; font-weight:700; color:var(--text); margin:0 0 8px 0; }

/* ============ Badges ============ */
.badge{ padding:2px 10px; border-radius:999px; font-weight:700; font-size:.82rem; white-space:nowrap; }

/* ============ Heatmap ============ */
table.heatmap{ border-collapse:separate; border-spacing:2px; width:100%; }
table.heatmap th{ background:var(--head); color:var(--muted); font-size:.82rem; padding:6px 8px; text-align:center; }
table.heatmap td{ text-align:center; padding:8px; border-radius:6px; font-weight:700; min-width:48px; }
table.heatmap th.row{ text-align:left; }

@keyframes fadeSlideUp { from { opacity:0; transform:translateY(6px) } to { opacity:1; transform:translateY(0) } }
</style>
"""


def inject_theme(name: str | None = None):
    theme = get_theme(name)
    css = CSS
    for key, value in theme.items():
        css = css.replace(f"__{key}__", value)
    st.markdown(css, unsafe_allow_html=True)
