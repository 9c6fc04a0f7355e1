'''
Shared synthetic layers in NAD83 / UTM 18N, laid out around a 2 km square town.
'''
import matplotlib

matplotlib.use('Agg')

import geopandas as gpd
import pytest
from shapely.geometry import LineString, Point, box

from st0_config import Config, PointOfInterest
from st1_get_tiger_layers import classify_roads

CRS = 'EPSG:26918'
X0, Y0 = 630000.0, 4580000.0


@pytest.fixture
def towns():
    return gpd.GeoDataFrame(
        {
            'NAME': ['Bethel', 'Danbury'],
            'COUNTYFP': ['001', '001'],
        },
        geometry=[
            box(X0, Y0, X0 + 2000, Y0 + 2000),
            box(X0 - 3000, Y0, X0, Y0 + 2000),
        ],
        crs=CRS
    )


@pytest.fixture
def layers():
    roads = gpd.GeoDataFrame(
        {
            'FULLNAME': ['Main St', 'US Hwy 6', 'Far Rd'],
            'MTFCC': ['S1400', 'S1100', 'S1400'],
        },
        geometry=[
            LineString([(X0 + 100, Y0 + 1000), (X0 + 1900, Y0 + 1000)]),
            LineString([(X0 - 1500, Y0 + 500), (X0 + 1500, Y0 + 500)]),
            LineString([(X0 + 10000, Y0), (X0 + 12000, Y0)]),
        ],
        crs=CRS
    )
    rails = gpd.GeoDataFrame(
        {'FULLNAME': ['Danbury Branch'], 'MTFCC': ['R1011']},
        geometry=[LineString([(X0 + 1000, Y0 - 2000), (X0 + 1000, Y0 + 4000)])],
        crs=CRS
    )
    linearwater = gpd.GeoDataFrame(
        {'FULLNAME': ['East Swamp Brk'], 'MTFCC': ['H3010']},
        geometry=[LineString([(X0 + 200, Y0 + 200), (X0 + 800, Y0 + 1800)])],
        crs=CRS
    )
    areawater = gpd.GeoDataFrame(
        {'FULLNAME': ['Eureka Lake'], 'MTFCC': ['H2030']},
        geometry=[Point(X0 + 1500, Y0 + 1500).buffer(200)],
        crs=CRS
    )
    return {
        'roads': classify_roads(roads),
        'rails': rails,
        'linearwater': linearwater,
        'areawater': areawater,
    }


@pytest.fixture
def cfg(tmp_path):
    return Config(
        town='Bethel',
        data_dir=tmp_path / 'data',
        out_dir=tmp_path / 'outputs',
        crs_projected=CRS,
        buffer_m=500.0,
        figsize=(4, 5),
        dpi=30,
        output_files=('poster.png', 'poster.pdf'),
        poi_crs=CRS,
        points_of_interest=[
            PointOfInterest('Station', X0 + 1000, Y0 + 1200),
            PointOfInterest('Far Away', X0 + 50000, Y0 + 50000),
        ],
    )
