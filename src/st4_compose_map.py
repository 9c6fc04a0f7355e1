import logging
from pathlib import Path

import matplotlib.colors as mcolors
import matplotlib.image as mpimg
import matplotlib.pyplot as plt
from matplotlib import patheffects
from matplotlib.offsetbox import AnnotationBbox, OffsetImage
import pandas as pd

from st2_subset_town import split_by_boundary

logger = logging.getLogger(__name__)

# back to front
ZORDER = {
    'areawater': 1,
    'linearwater': 2,
    'road_secondary': 3,
    'road_primary': 4,
    'rail': 5,
    'boundary': 6,
    'poi_icon': 7,
    'poi_label': 8,
    'hidden_note': 9,
    'caption': 10,
}


def darken(color, factor):
    '''
    Scale a colour's RGB channels by factor (0 = black, 1 = unchanged).
    '''
    r, g, b = mcolors.to_rgb(color)
    return mcolors.to_hex((r * factor, g * factor, b * factor))


def _plot_lines(ax, gdf, **style):
    if gdf is None or gdf.empty:
        return
    gdf.plot(ax=ax, **style)


def _plot_split_lines(ax, lines, town_geom, color, linewidth, zorder, cfg, linestyle='solid'):
    '''
    Draw a line layer, inside the town in color and outside it in a darker shade
    when cfg.split_at_boundary is set.
    '''
    if lines is None or lines.empty:
        return

    if not cfg.split_at_boundary:
        _plot_lines(ax, lines, color=color, linewidth=linewidth,
                    linestyle=linestyle, zorder=zorder)
        return

    inside, outside = split_by_boundary(lines, town_geom)
    _plot_lines(ax, outside, color=darken(color, cfg.darken_factor), linewidth=linewidth,
                linestyle=linestyle, alpha=cfg.line_styles.outside_alpha, zorder=zorder)
    _plot_lines(ax, inside, color=color, linewidth=linewidth,
                linestyle=linestyle, zorder=zorder)


def _load_icon(icon, cache):
    icon = Path(icon)
    if icon not in cache:
        if not icon.exists():
            raise FileNotFoundError(f'Icon image not found: {icon}')
        cache[icon] = mpimg.imread(icon)
    return cache[icon]


def _draw_points_of_interest(ax, points, cfg):
    pal = cfg.palette
    ls = cfg.line_styles
    halo = [patheffects.withStroke(linewidth=3, foreground=pal.background)]
    icons = {}

    for _, row in points.iterrows():
        x, y = row.geometry.x, row.geometry.y

        if pd.notna(row['icon']):
            img = OffsetImage(_load_icon(row['icon'], icons), zoom=ls.icon_zoom)
            ab = AnnotationBbox(img, (x, y), frameon=False, zorder=ZORDER['poi_icon'])
            ax.add_artist(ab)
        else:
            ax.scatter([x], [y], s=ls.poi_marker_size, color=pal.poi_marker,
                       edgecolor=pal.background, linewidth=0.8, zorder=ZORDER['poi_icon'])

        ax.annotate(
            row['label'], (x, y),
            xytext=(7, 7), textcoords='offset points',
            fontsize=ls.label_size, color=pal.text,
            path_effects=halo, zorder=ZORDER['poi_label']
        )


def compose_map(layers, town, bbox, points, cfg):
    '''
    Layer the cropped data onto one poster figure.

    params:
        layers (dict): cropped GeoDataFrames keyed roads, rails, linearwater, areawater
        town (GeoDataFrame): the selected town polygon
        bbox (tuple): (minx, miny, maxx, maxy) map extent
        points (GeoDataFrame): points of interest already inside bbox
        cfg (Config): styling, caption and figure size
    '''
    pal = cfg.palette
    ls = cfg.line_styles
    town_geom = town.union_all()

    fig, ax = plt.subplots(figsize=cfg.figsize, facecolor=pal.background)
    fig.subplots_adjust(left=0.04, right=0.96, top=0.97, bottom=0.13)
    ax.set_facecolor(pal.background)

    # 1) water
    areawater = layers.get('areawater')
    if areawater is not None and not areawater.empty:
        areawater.plot(ax=ax, facecolor=pal.water, edgecolor='none',
                       alpha=ls.water_alpha, zorder=ZORDER['areawater'])
    _plot_lines(ax, layers.get('linearwater'), color=pal.linear_water,
                linewidth=ls.linear_water, zorder=ZORDER['linearwater'])

    # 2) roads, local first so highways sit on top
    roads = layers.get('roads')
    if roads is not None and not roads.empty:
        _plot_split_lines(ax, roads.loc[roads['road_class'] == 'secondary'], town_geom,
                          pal.road_secondary, ls.road_secondary, ZORDER['road_secondary'], cfg)
        _plot_split_lines(ax, roads.loc[roads['road_class'] == 'primary'], town_geom,
                          pal.road_primary, ls.road_primary, ZORDER['road_primary'], cfg)

    # 3) rails
    _plot_split_lines(ax, layers.get('rails'), town_geom, pal.rail, ls.rail,
                      ZORDER['rail'], cfg, linestyle=ls.rail_dash)

    # 4) town outline
    town.boundary.plot(ax=ax, color=pal.boundary, linewidth=ls.boundary,
                       linestyle=ls.boundary_dash, zorder=ZORDER['boundary'])

    # 5) points of interest
    if points is not None and not points.empty:
        _draw_points_of_interest(ax, points, cfg)

    # 6) text
    if cfg.hidden_note:
        ax.text(0.995, 0.005, cfg.hidden_note, transform=ax.transAxes,
                ha='right', va='bottom', fontsize=4, color=pal.background,
                zorder=ZORDER['hidden_note'])

    fig.text(0.5, 0.06, cfg.caption_text, ha='center', va='center',
             fontsize=ls.caption_size, color=pal.text, family='serif',
             zorder=ZORDER['caption'])

    ax.set_xlim(bbox[0], bbox[2])
    ax.set_ylim(bbox[1], bbox[3])
    ax.set_aspect('equal')
    ax.set_axis_off()

    logger.info('Composed map of %s, extent %s', cfg.town, [round(v) for v in bbox])
    return fig
