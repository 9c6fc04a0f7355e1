import argparse
import logging
from pathlib import Path

from logging_config import setup_logging
from st0_config import bethel_ct
from st1_get_tiger_layers import get_tiger_layers
from st2_subset_town import (crop_layers, filter_points_in_bbox, points_of_interest_gdf,
                             select_town, town_bbox)
from st3_smooth_water import smooth_polygons
from st4_compose_map import compose_map
from st5_export_map import export_map

logger = logging.getLogger(__name__)


def make_poster(cfg):
    '''
    Run acquire -> subset -> smooth -> compose -> export for one town.
    Returns the written file paths.
    '''
    cfg.ensure_dirs()

    # 1) acquire, every layer already in cfg.crs_projected
    layers = get_tiger_layers(cfg)
    towns = layers.pop('towns')

    # 2) subset
    town = select_town(towns, cfg.town)
    if town.empty:
        raise ValueError(f'Town {cfg.town!r} not found in {cfg.county} County, {cfg.state}')

    bbox = town_bbox(town, cfg.buffer_m)
    logger.info('%s bounds (buffered %.0f m): %s', cfg.town, cfg.buffer_m, bbox)
    layers = crop_layers(layers, bbox)

    points = points_of_interest_gdf(cfg.points_of_interest, cfg.poi_crs, cfg.crs_projected)
    points = filter_points_in_bbox(points, bbox)

    # 3) smooth
    layers['areawater'] = smooth_polygons(layers['areawater'], cfg.smoothing_refinements)

    # 4) compose + 5) export
    fig = compose_map(layers, town, bbox, points, cfg)
    return export_map(fig, cfg)


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description='Render a TIGER/Line poster map of one town.')
    ap.add_argument('--town', help='County subdivision NAME, e.g. Bethel')
    ap.add_argument('--state', help='State abbreviation or FIPS, e.g. CT or 09')
    ap.add_argument('--county', help='County name, e.g. Fairfield')
    ap.add_argument('--year', type=int, help='TIGER/Line vintage, e.g. 2021')
    ap.add_argument('--out', action='append', type=Path,
                    help='Output file (.pdf/.png), relative to outputs/; repeat for several')
    ap.add_argument('--no-split', action='store_true',
                    help='Do not shade roads and rails outside the town')
    ap.add_argument('--crs', help='Projected map CRS, e.g. EPSG:26910; default is the UTM zone of the town')
    ap.add_argument('--log-file', type=Path, help='Also write the log to this file')
    ap.add_argument('--verbose', action='store_true')
    return ap.parse_args(argv)


def config_from_args(args):
    cfg = bethel_ct()

    # a different town keeps the styling but not the Bethel landmarks
    if args.town and args.town != cfg.town:
        slug = args.town.lower().replace(' ', '_')
        cfg.town = args.town
        cfg.caption = None
        cfg.points_of_interest = []
        cfg.output_files = (f'{slug}_poster.pdf', f'{slug}_poster.png')

    if args.state:
        cfg.state = args.state
    if args.county:
        cfg.county = args.county

    # another place gets the UTM zone of its own towns unless one is given
    if (cfg.town, cfg.state, cfg.county) != ('Bethel', 'CT', 'Fairfield'):
        cfg.crs_projected = None
    if args.crs:
        cfg.crs_projected = args.crs

    if args.year:
        cfg.year = args.year
    if args.out:
        cfg.output_files = tuple(args.out)
    if args.no_split:
        cfg.split_at_boundary = False

    return cfg


def main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    written = make_poster(config_from_args(args))
    for fp in written:
        print(f'Saved poster to: {fp}')


if __name__ == '__main__':
    main()
