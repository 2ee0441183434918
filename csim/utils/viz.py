import plotly.express as px
import pandas as pd

COUNTERS = ["hits", "misses", "evictions"]


def export_set_activity(rows, path: str):
    if not rows:
        with open(path, "w") as f:
            f.write("<h1>Cache Set Activity</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(rows)
    # Ensure numeric counters, dropping rows that cannot be plotted
    for col in ["set"] + COUNTERS:
        df[col] = pd.to_numeric(df[col], errors='coerce')
    df = df.dropna(subset=["set"] + COUNTERS)
    df["set"] = df["set"].astype(int).astype(str)

    long_df = df.melt(id_vars=["set"], value_vars=COUNTERS, var_name="outcome", value_name="count")

    fig = px.bar(
        long_df,
        x="set",
        y="count",
        color="outcome",
        barmode="group",
        hover_data=["set", "outcome", "count"],
        title="Cache Set Activity (hits / misses / evictions per set)",
        labels={"set": "Set Index", "count": "Accesses", "outcome": "Outcome"}
    )

    fig.update_xaxes(type="category", title="Set Index")
    fig.update_layout(
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Outcome"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)


def export_set_activity_ascii(rows, width: int = 60):
    if not rows:
        return "No set activity."

    max_count = max((row['hits'] + row['misses'] for row in rows), default=0)
    if max_count == 0:
        return "No set activity."

    scale = width / max_count

    chart = "Cache Set Activity (ASCII Chart)  H=hit M=miss E=miss with eviction\n"
    chart += "-" * (width + 12) + "\n"

    for row in sorted(rows, key=lambda r: r['set']):
        clean_misses = row['misses'] - row['evictions']
        lane = ("H" * int(row['hits'] * scale)
                + "M" * int(clean_misses * scale)
                + "E" * int(row['evictions'] * scale))
        chart += f"{row['set']:>8} |{lane:<{width}}\n"

    chart += "-" * (width + 12) + "\n"
    chart += f"0 accesses {' ' * (width - 10)}{max_count} accesses\n"

    return chart
