import logging
import zipfile
from pathlib import Path

import geopandas as gpd
import numpy as np
import pandas as pd
import requests

from st0_config import Config

logger = logging.getLogger(__name__)

# TIGER/Line category -> file scope
TIGER_SCOPES = {
    'cousub': 'state',
    'roads': 'county',
    'linearwater': 'county',
    'areawater': 'county',
    'rails': 'national',
}

# pipeline layer name -> TIGER/Line category
LAYER_CATEGORIES = {
    'towns': 'cousub',
    'roads': 'roads',
    'rails': 'rails',
    'linearwater': 'linearwater',
    'areawater': 'areawater',
}


def tiger_url(category, year, state_fp, county_fp,
              base_url='https://www2.census.gov/geo/tiger'):
    '''
    Build the download URL of one TIGER/Line shapefile zip.
    '''
    scope = TIGER_SCOPES.get(category)
    if scope is None:
        raise ValueError(f'Unknown TIGER/Line category: {category!r}')

    if scope == 'national':
        area = 'us'
    elif scope == 'state':
        area = state_fp
    else:
        area = f'{state_fp}{county_fp}'

    return f'{base_url}/TIGER{year}/{category.upper()}/tl_{year}_{area}_{category}.zip'


def download_file(url, dest, timeout=120, use_cache=True):
    '''
    Download url to dest unless it is already on disk.
    '''
    dest = Path(dest)
    if use_cache and dest.exists():
        logger.info('Using cached %s', dest)
        return dest

    logger.info('Downloading %s', url)
    r = requests.get(url, timeout=timeout)
    r.raise_for_status()

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(r.content)
    return dest


def read_tiger_zip(zip_path):
    '''
    Read the shapefile inside a TIGER/Line zip.
    '''
    with zipfile.ZipFile(zip_path, 'r') as z:
        shp_names = [n for n in z.namelist() if n.lower().endswith('.shp')]
    if not shp_names:
        raise RuntimeError(f'No shapefile found in {zip_path}')

    return gpd.read_file(f'zip://{zip_path}!{shp_names[0]}')


def resolve_map_crs(gdf, cfg):
    '''
    Return cfg.crs_projected, first filling it with the NAD83 UTM zone that
    covers gdf when none is configured.
    '''
    if cfg.crs_projected is None:
        utm = gdf.to_crs(cfg.crs_tiger).estimate_utm_crs(datum_name='NAD83')
        cfg.crs_projected = utm.to_string()
        logger.info('Map CRS estimated from %d features: %s', len(gdf), cfg.crs_projected)
    return cfg.crs_projected


def to_map_crs(gdf, cfg):
    # TIGER ships NAD83; assume it when the .prj is missing
    if gdf.crs is None:
        gdf = gdf.set_crs(cfg.crs_tiger)
    return gdf.to_crs(resolve_map_crs(gdf, cfg))


def load_county_table(cfg):
    '''
    Census state/county FIPS reference table, all columns as strings.
    '''
    fp = download_file(
        cfg.county_table_url,
        cfg.data_dir / cfg.county_table_url.rsplit('/', 1)[-1],
        timeout=cfg.timeout,
        use_cache=cfg.use_cache
    )
    return pd.read_csv(fp, sep='|', dtype=str, encoding='utf-8', encoding_errors='replace')


def lookup_county_fips(table, state, county):
    '''
    Resolve (state, county) to (state FIPS, county FIPS).

    params:
        table (DataFrame): national county table with STATE, STATEFP, COUNTYFP, COUNTYNAME
        state (str): postal abbreviation ('CT') or FIPS ('09')
        county (str): 'Fairfield' or 'Fairfield County', any case
    '''
    state = str(state).strip()
    if state.isdigit():
        rows = table.loc[table['STATEFP'] == state.zfill(2)]
    else:
        rows = table.loc[table['STATE'].str.upper() == state.upper()]

    wanted = county.strip().lower()
    names = rows['COUNTYNAME'].str.lower()
    match = rows.loc[(names == wanted) | (names == f'{wanted} county')]

    if match.empty:
        raise ValueError(f'County {county!r} not found in state {state!r}')
    if len(match) > 1:
        logger.warning('%d counties match %r in %s, using the first',
                       len(match), county, state)

    row = match.iloc[0]
    return row['STATEFP'], row['COUNTYFP']


def classify_roads(roads, primary_mtfcc=('S1100', 'S1200')):
    '''
    Tag each road 'primary' (highway) or 'secondary' (local) by its MTFCC code.
    '''
    roads = roads.copy()
    roads['road_class'] = np.where(
        roads['MTFCC'].isin(list(primary_mtfcc)), 'primary', 'secondary'
    )
    return roads


def get_layer(category, state_fp, county_fp, cfg):
    '''
    Download one TIGER/Line layer and reproject it to the map CRS.
    The state-wide county subdivision layer is narrowed to the county.
    '''
    url = tiger_url(category, cfg.year, state_fp, county_fp, base_url=cfg.tiger_base_url)
    zip_fp = download_file(
        url,
        cfg.data_dir / url.rsplit('/', 1)[-1],
        timeout=cfg.timeout,
        use_cache=cfg.use_cache
    )

    gdf = read_tiger_zip(zip_fp)
    if category == 'cousub':
        gdf = gdf.loc[gdf['COUNTYFP'] == county_fp].copy()

    gdf = to_map_crs(gdf, cfg)
    logger.info('%s: %d features, crs %s', category, len(gdf), gdf.crs)
    return gdf


def get_tiger_layers(cfg=None):
    '''
    Fetch every layer the poster needs, all in cfg.crs_projected.

    Returns a dict with keys towns, roads, rails, linearwater, areawater.
    Towns are read first, so an unset cfg.crs_projected becomes the UTM zone
    of the county's towns.
    '''
    cfg = cfg or Config()

    table = load_county_table(cfg)
    state_fp, county_fp = lookup_county_fips(table, cfg.state, cfg.county)
    logger.info('%s County, %s -> FIPS %s%s', cfg.county, cfg.state, state_fp, county_fp)

    layers = {
        name: get_layer(category, state_fp, county_fp, cfg)
        for name, category in LAYER_CATEGORIES.items()
    }
    layers['roads'] = classify_roads(layers['roads'], cfg.primary_mtfcc)

    return layers
