import logging

import geopandas as gpd
import numpy as np
from shapely.geometry import MultiPolygon, Polygon

logger = logging.getLogger(__name__)


def chaikin_ring(coords, refinements=3):
    '''
    Chaikin corner cutting on a closed ring.

    Every edge P_i -> P_i+1 is replaced by the points 3/4 P_i + 1/4 P_i+1 and
    1/4 P_i + 3/4 P_i+1, repeated `refinements` times. Returns a closed
    (n, dims) array.
    '''
    pts = np.asarray(coords, dtype=float)
    if len(pts) > 1 and np.array_equal(pts[0], pts[-1]):
        pts = pts[:-1]

    # nothing to round on a degenerate ring
    if len(pts) < 3:
        return np.vstack([pts, pts[:1]])

    for _ in range(refinements):
        nxt = np.roll(pts, -1, axis=0)
        cut = np.empty((2 * len(pts), pts.shape[1]))
        cut[0::2] = 0.75 * pts + 0.25 * nxt
        cut[1::2] = 0.25 * pts + 0.75 * nxt
        pts = cut

    return np.vstack([pts, pts[:1]])


def smooth_polygon(geom, refinements=3):
    '''
    Smooth the exterior and every hole of a (Multi)Polygon.
    Multipolygons keep their part count; other geometry types pass through.

    The shell is cut inward and holes are cut independently, so an island close
    to a shore corner can end up outside the smoothed shell. Such a part is kept
    unsmoothed rather than returned invalid.
    '''
    if geom is None or geom.is_empty:
        return geom

    if isinstance(geom, Polygon):
        smoothed = Polygon(
            chaikin_ring(geom.exterior.coords, refinements),
            [chaikin_ring(ring.coords, refinements) for ring in geom.interiors]
        )
        if smoothed.is_valid or not geom.is_valid:
            return smoothed

        logger.debug('Smoothing would make a polygon invalid, keeping it as is')
        return geom

    if isinstance(geom, MultiPolygon):
        return MultiPolygon([smooth_polygon(p, refinements) for p in geom.geoms])

    return geom


def smooth_polygons(gdf, refinements=3):
    '''
    Copy of gdf with every polygon Chaikin-smoothed. The unsmoothed
    geometry is not kept.
    '''
    smoothed = gdf.copy()
    smoothed[gdf.geometry.name] = gpd.GeoSeries(
        [smooth_polygon(g, refinements) for g in gdf.geometry],
        index=gdf.index,
        crs=gdf.crs
    )

    logger.info('Smoothed %d polygons (%d refinements), area %.0f -> %.0f',
                len(gdf), refinements, gdf.geometry.area.sum(), smoothed.geometry.area.sum())
    return smoothed
