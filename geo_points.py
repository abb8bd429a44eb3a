#!/usr/bin/env python3
"""
Text and markers on a scatter-geo map.

Builds the Canadian cities example: a fixed table of labelled points handed to
plotly's Scattergeo trace over a North America geo layout.
"""
import argparse
import logging
import sys

import pandas as pd
import plotly.graph_objects as go

COLUMNS = ['label', 'lon', 'lat', 'color', 'textposition']

TEXT_POSITIONS = (
    'top left', 'top center', 'top right',
    'middle left', 'middle center', 'middle right',
    'bottom left', 'bottom center', 'bottom right',
)

CANADIAN_CITIES = [
    ('Montreal', -73.57, 45.5, '#bebada', 'top right'),
    ('Toronto', -79.24, 43.4, '#fdb462', 'top left'),
    ('Vancouver', -123.06, 49.13, '#fb8072', 'top center'),
    ('Calgary', -114.1, 51.1, '#d9d9d9', 'bottom right'),
    ('Edmonton', -113.28, 53.34, '#bc80bd', 'top right'),
    ('Ottawa', -75.43, 45.24, '#b3de69', 'top left'),
    ('Halifax', -63.57, 44.64, '#8dd3c7', 'bottom right'),
    ('Victoria', -123.21, 48.25, '#80b1d3', 'bottom left'),
    ('Winnepeg', -97.13, 49.89, '#fccde5', 'top right'),
    ('Regina', -104.6, 50.45, '#ffffb3', 'top right'),
]


def load_points(filepath=None) -> pd.DataFrame:
    """
    Loads the point table into a DataFrame.
    Without a filepath the built-in Canadian cities literal is used.
    """
    if filepath is None:
        return pd.DataFrame(CANADIAN_CITIES, columns=COLUMNS)

    df = pd.read_csv(filepath)
    missing = [c for c in COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Point file '{filepath}' is missing columns: {missing}")
    return df[COLUMNS]


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    """The named column, or an all-missing one when the table lacks it."""
    if name in df.columns:
        return df[name]
    return pd.Series([None] * len(df), index=df.index, dtype=object)


def check_points(df: pd.DataFrame) -> dict:
    """
    Lints the point table. Bad rows are reported in the returned evidence,
    never raised, so the caller decides whether to render anyway.
    Non-numeric coordinates count as out of range, and a table without
    any points does not pass.
    """
    missing = [c for c in COLUMNS if c not in df.columns]
    lengths = {c: int(_column(df, c).notna().sum()) for c in COLUMNS}

    lon_ok = pd.to_numeric(_column(df, 'lon'), errors='coerce').between(-180, 180)
    lat_ok = pd.to_numeric(_column(df, 'lat'), errors='coerce').between(-90, 90)
    pos_ok = _column(df, 'textposition').isin(TEXT_POSITIONS)

    bad = ~(lon_ok & lat_ok & pos_ok)
    labels = _column(df, 'label').where(_column(df, 'label').notna(), df.index.to_series())
    evidence = {
        "n_points": len(df),
        "missing_columns": missing,
        "lengths_match": not missing and len(set(lengths.values())) == 1,
        "lon_in_range": bool(lon_ok.all()),
        "lat_in_range": bool(lat_ok.all()),
        "valid_textpositions": bool(pos_ok.all()),
        "invalid_rows": labels[bad].tolist(),
    }
    evidence["is_valid"] = (evidence["n_points"] > 0 and evidence["lengths_match"]
                            and evidence["lon_in_range"] and evidence["lat_in_range"]
                            and evidence["valid_textpositions"])
    return evidence


def build_scatter_geo_trace(df: pd.DataFrame, name='Canadian cities') -> go.Scattergeo:
    return go.Scattergeo(
        mode='markers+text',
        text=df['label'].tolist(),
        lon=df['lon'].tolist(),
        lat=df['lat'].tolist(),
        marker=dict(
            size=7,
            color=df['color'].tolist(),
            line=dict(width=1)
        ),
        name=name,
        textposition=df['textposition'].tolist(),
    )


def build_geo_layout(title='Canadian cities') -> go.Layout:
    """North America map with rivers, lakes and province borders."""
    return go.Layout(
        title=dict(text=title, font=dict(size=16)),
        font=dict(family='Droid Serif, serif', size=6),
        geo=dict(
            scope='north america',
            resolution=50,
            lonaxis=dict(range=[-130, -55]),
            lataxis=dict(range=[40, 70]),
            showrivers=True,
            rivercolor='#fff',
            showlakes=True,
            lakecolor='#fff',
            showland=True,
            landcolor='#EAEAAE',
            countrycolor='#d3d3d3',
            countrywidth=1.5,
            subunitcolor='#d3d3d3'
        )
    )


def create_scatter_geo_figure(df: pd.DataFrame = None) -> go.Figure:
    if df is None:
        df = load_points()

    evidence = check_points(df)
    if not evidence["is_valid"]:
        logging.warning(f"Point table failed lint, rendering anyway: {evidence}")

    return go.Figure(data=[build_scatter_geo_trace(df)], layout=build_geo_layout())


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render the text-and-markers scatter-geo example.")
    parser.add_argument('--csv', type=str, default=None, help='Optional CSV with label,lon,lat,color,textposition.')
    parser.add_argument('--output', type=str, default='scatter_geo_text.html', help='HTML file to write.')
    args = parser.parse_args(argv)

    try:
        df = load_points(args.csv)
    except FileNotFoundError:
        print(f"Error: The file '{args.csv}' was not found.", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    fig = create_scatter_geo_figure(df)
    fig.write_html(args.output, include_plotlyjs='cdn')
    print(f"Generated chart: {args.output}")


if __name__ == '__main__':
    main()
