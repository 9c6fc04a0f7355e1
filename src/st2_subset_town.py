import logging

import geopandas as gpd
from shapely.geometry import box

logger = logging.getLogger(__name__)


def select_town(towns, name):
    '''
    County subdivision rows whose NAME is exactly name (empty when absent).
    '''
    return towns.loc[towns['NAME'] == name].copy()


def town_bbox(town, buffer_m):
    '''
    Axis-aligned (minx, miny, maxx, maxy) around the town buffered by buffer_m.
    buffer_m is in CRS units, so the town must already be projected.
    '''
    if town.empty:
        raise ValueError('Cannot compute a bounding box for an empty selection')

    minx, miny, maxx, maxy = town.buffer(buffer_m).total_bounds
    return float(minx), float(miny), float(maxx), float(maxy)


def crop_to_bbox(gdf, bbox):
    '''
    Clip a layer to the box. Features crossing the edge are cut at the edge,
    features outside are dropped, nothing is repaired.
    '''
    cropped = gpd.clip(gdf, mask=bbox, keep_geom_type=True)
    return cropped.loc[~cropped.geometry.is_empty]


def crop_layers(layers, bbox):
    cropped = {}
    for name, gdf in layers.items():
        cropped[name] = crop_to_bbox(gdf, bbox)
        logger.info('%s cropped: %d of %d features', name, len(cropped[name]), len(gdf))
    return cropped


def _as_geometry(boundary):
    if isinstance(boundary, (gpd.GeoDataFrame, gpd.GeoSeries)):
        return boundary.union_all()
    return boundary


def split_by_boundary(lines, boundary):
    '''
    Split a line layer against the town polygon.

    Returns (inside, outside): the intersection with and the difference from
    the boundary. Stray points from lines touching the boundary are dropped.
    '''
    boundary = _as_geometry(boundary)
    geom_col = lines.geometry.name

    inside = lines.copy()
    inside[geom_col] = lines.geometry.intersection(boundary)

    outside = lines.copy()
    outside[geom_col] = lines.geometry.difference(boundary)

    return _line_parts(inside), _line_parts(outside)


def _line_parts(gdf):
    gdf = gdf.loc[~gdf.geometry.is_empty].explode(index_parts=False)
    return gdf.loc[gdf.geom_type.isin(['LineString', 'LinearRing'])]


def points_of_interest_gdf(pois, poi_crs, target_crs):
    '''
    Point layer (label, icon, geometry) from the hand-authored table, in target_crs.
    '''
    gdf = gpd.GeoDataFrame(
        {
            'label': [p.label for p in pois],
            'icon': [p.icon for p in pois],
        },
        geometry=gpd.points_from_xy([p.x for p in pois], [p.y for p in pois]),
        crs=poi_crs
    )
    return gdf.to_crs(target_crs)


def filter_points_in_bbox(points, bbox):
    '''
    Keep the points inside the map extent; warn about each one left out.
    '''
    keep = points.geometry.intersects(box(*bbox))

    for _, row in points.loc[~keep].iterrows():
        logger.warning(
            'Point of interest %r at (%.1f, %.1f) is outside the map extent, skipped',
            row['label'], row.geometry.x, row.geometry.y
        )

    return points.loc[keep].copy()
