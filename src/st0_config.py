from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class PointOfInterest:
    label: str
    x: float
    y: float
    icon: Path | None = None # None draws a plain marker


@dataclass
class Palette:
    background: str = '#1c2b36'
    water: str = '#3f6f86'
    linear_water: str = '#5d8ea3'
    road_primary: str = '#f4ead5'
    road_secondary: str = '#b9b09a'
    rail: str = '#e0896b'
    boundary: str = '#f4ead5'
    poi_marker: str = '#e0896b'
    text: str = '#f4ead5'


@dataclass
class LineStyles:
    # stroke widths in points
    linear_water: float = 0.5
    road_secondary: float = 0.45
    road_primary: float = 1.6
    rail: float = 1.0
    boundary: float = 1.2

    # matplotlib dash tuples
    rail_dash: tuple = (0, (4, 2))
    boundary_dash: tuple = (0, (6, 3))

    water_alpha: float = 1.0
    outside_alpha: float = 0.85
    poi_marker_size: float = 60
    icon_zoom: float = 0.06
    label_size: float = 9
    caption_size: float = 42


@dataclass
class Config:
    # place
    town: str = 'Bethel'
    state: str = 'CT'
    county: str = 'Fairfield'
    year: int = 2021 # CT counties were replaced by planning regions from TIGER2022

    data_dir: Path = Path('data')
    out_dir: Path = Path('outputs')

    # CRS choices:
    crs_wgs84: str = 'EPSG:4326'
    crs_tiger: str = 'EPSG:4269' # NAD83, as published
    crs_projected: str | None = None # analysis + map CRS; None picks the towns' NAD83 UTM zone

    # sources
    tiger_base_url: str = 'https://www2.census.gov/geo/tiger'
    county_table_url: str = 'https://www2.census.gov/geo/docs/reference/codes2020/national_county2020.txt'
    timeout: int = 120
    use_cache: bool = True

    # processing
    buffer_m: float = 800.0
    smoothing_refinements: int = 3
    primary_mtfcc: tuple = ('S1100', 'S1200') # interstates/US routes + state highways
    split_at_boundary: bool = True
    darken_factor: float = 0.45

    # styling
    palette: Palette = field(default_factory=Palette)
    line_styles: LineStyles = field(default_factory=LineStyles)
    caption: str | None = None
    hidden_note: str = 'drawn from census TIGER/Line'

    # points of interest, authored in poi_crs
    points_of_interest: list = field(default_factory=list)
    poi_crs: str = 'EPSG:4326'

    # export
    figsize: tuple = (12, 16)
    dpi: int = 320 # "retina"
    output_files: tuple = ('poster.pdf', 'poster.png')

    @property
    def output_paths(self):
        return [self.out_dir / name for name in self.output_files]

    @property
    def caption_text(self):
        return self.caption if self.caption is not None else self.town.upper()

    def ensure_dirs(self):
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.out_dir.mkdir(parents=True, exist_ok=True)


def bethel_ct():
    '''
    Default poster: Bethel, Fairfield County, Connecticut.
    '''
    return Config(
        town='Bethel',
        state='CT',
        county='Fairfield',
        crs_projected='EPSG:26918', # NAD83 / UTM 18N
        caption='BETHEL  ·  CONNECTICUT',
        output_files=('bethel_poster.pdf', 'bethel_poster.png'),
        points_of_interest=[
            PointOfInterest('Bethel Station', -73.4180, 41.3758),
            PointOfInterest('Public Library', -73.4137, 41.3716),
            PointOfInterest('Municipal Center', -73.4122, 41.3724),
            PointOfInterest('Meckauer Park', -73.4043, 41.3640),
        ],
    )
