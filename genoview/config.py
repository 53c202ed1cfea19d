"""
genoview Configuration

Viewport, composition and per-track layout parameters.
Every pixel gap and row limit used during layout lives here.
"""
from dataclasses import dataclass, field
from typing import Dict, Tuple


GRCH38_CHROMOSOME_LENGTHS: Dict[str, int] = {
    'chr1': 248956422, 'chr2': 242193529, 'chr3': 198295559,
    'chr4': 190214555, 'chr5': 181538259, 'chr6': 170805979,
    'chr7': 159345973, 'chr8': 145138636, 'chr9': 138394717,
    'chr10': 133797422, 'chr11': 135086622, 'chr12': 133275309,
    'chr13': 114364328, 'chr14': 107043718, 'chr15': 101991189,
    'chr16': 90338345, 'chr17': 83257441, 'chr18': 80373285,
    'chr19': 58617616, 'chr20': 64444167, 'chr21': 46709983,
    'chr22': 50818468, 'chrX': 156040895, 'chrY': 57227415,
    'chrM': 16569,
}
"""GRCh38 chromosome sizes (bp)"""


@dataclass
class BrowserConfig:
    """
    Viewport and canvas configuration
    """

    # ============================================================
    # CANVAS
    # ============================================================
    width: int = 1000
    """Pixel width of the track area (label column excluded)"""

    label_width: int = 100
    """Width of the track label column (px)"""

    track_area_height: int = 400
    """Minimum canvas height for the stacked tracks (px)"""

    ruler_height: int = 40
    """Height of the coordinate ruler (px)"""

    track_gap: int = 5
    """Vertical gap between adjacent visible tracks (px)"""

    collapsed_height: int = 20
    """Effective height of a collapsed track (px)"""

    # ============================================================
    # ZOOM BOUNDS
    # ============================================================
    min_bp: int = 100
    """Smallest visible span (bp)"""

    max_bp: int = 10_000_000
    """Largest visible span (bp)"""

    zoom_step: float = 2.0
    """Factor applied by zoom_in / zoom_out"""

    pan_fraction: float = 0.25
    """Fraction of the span shifted by pan_left / pan_right"""

    # ============================================================
    # RULER
    # ============================================================
    target_ticks: int = 10
    """Target number of major ruler ticks"""

    major_tick_length: int = 15
    """Major tick length (px)"""

    minor_tick_length: int = 8
    """Minor tick length (px)"""

    # ============================================================
    # GENOME
    # ============================================================
    default_region: Tuple[str, int, int] = ('chr17', 7560000, 7730000)
    """Initial region (TP53 neighbourhood)"""

    genome_lengths: Dict[str, int] = field(default_factory=lambda: dict(GRCH38_CHROMOSOME_LENGTHS))
    """Chromosome lengths used for region validation (bp)"""


@dataclass
class GeneTrackConfig:
    """Gene model track layout"""

    height: int = 80
    """Expanded track height (px)"""

    exon_height: int = 20
    """Exon rectangle height (px)"""

    intron_height: float = 2.0
    """Intron line stroke width (px)"""

    row_spacing: int = 15
    """Extra vertical space per gene row, used for the label (px)"""

    top_padding: int = 10
    """Offset of the first gene row from the track top (px)"""

    gene_padding: float = 50.0
    """Minimum horizontal gap between genes sharing a row (px)"""

    max_rows: int = 0
    """Row limit; 0 derives the limit from the track height"""

    arrow_spacing: float = 100.0
    """Distance between strand chevrons on the intron line (px)"""

    arrow_size: float = 4.0
    """Strand chevron half-size (px)"""

    min_exon_width: float = 2.0
    """Minimum drawn exon width (px)"""

    show_labels: bool = True
    """Draw gene symbol and strand glyph"""


@dataclass
class MutationTrackConfig:
    """Lollipop mutation track layout"""

    height: int = 100
    """Expanded track height (px)"""

    min_gap: float = 20.0
    """Pixel distance below which neighbouring mutations are grouped"""

    min_radius: float = 4.0
    """Head radius for the smallest sample count (px)"""

    max_radius: float = 15.0
    """Head radius for the largest sample count (px)"""

    min_stem: float = 30.0
    """Stem height for the smallest sample count (px)"""

    max_stem: float = 60.0
    """Stem height for the largest sample count (px)"""

    group_stem: float = 50.0
    """Stem height of aggregate glyphs (px)"""

    baseline_offset: float = 20.0
    """Distance of the baseline from the track bottom (px)"""

    label_min_samples: int = 10
    """Sample count above which the amino-acid change is labelled"""

    show_labels: bool = True
    """Draw amino-acid change labels"""


@dataclass
class SignalTrackConfig:
    """Point coverage track layout"""

    height: int = 60
    """Expanded track height (px)"""

    color: str = '#4CAF50'
    """Fill and line color"""

    fill_opacity: float = 0.4
    """Area fill opacity"""

    padding_top: int = 5
    """Space above the plot area (px)"""

    padding_bottom: int = 15
    """Space below the plot area (px)"""

    axis_ticks: int = 3
    """Number of y-axis ticks"""

    show_axis: bool = True
    """Draw y-axis ticks and grid lines"""


@dataclass
class AnnotationTrackConfig:
    """Regulatory/region annotation track layout"""

    height: int = 40
    """Expanded track height (px)"""

    bar_height: int = 16
    """Annotation bar height (px)"""

    default_color: str = '#9C27B0'
    """Bar color when the record carries none"""

    min_width: float = 2.0
    """Minimum drawn bar width (px)"""

    label_min_width: float = 30.0
    """Bars narrower than this are not labelled (px)"""

    char_width: float = 7.0
    """Approximate label character width for truncation (px)"""

    show_labels: bool = True
    """Draw annotation names inside bars"""


@dataclass
class AlignmentTrackConfig:
    """Aligned-read pileup track layout"""

    height: int = 300
    """Expanded track height (px)"""

    read_height: int = 10
    """Height of one read row (px)"""

    read_spacing: int = 2
    """Vertical space between read rows (px)"""

    read_gap: float = 2.0
    """Minimum horizontal gap between reads sharing a row (px)"""

    max_rows: int = 0
    """Row limit; 0 derives the limit from the track height"""

    coverage_height: int = 60
    """Coverage histogram height (px)"""

    coverage_bins: int = 200
    """Number of coverage bins computed from reads"""

    show_coverage: bool = True
    """Draw the strand coverage histogram above the reads"""

    min_mapq: int = 0
    """Reads below this mapping quality are dropped"""

    color_by: str = 'strand'
    """One of 'strand', 'mapq', 'insert_size', 'pair_orientation'"""

    insert_size_range: Tuple[int, int] = (150, 800)
    """Expected insert size range for insert-size coloring (bp)"""

    show_soft_clips: bool = True
    """Draw soft-clipped bases"""


@dataclass
class ContinuousSignalTrackConfig:
    """Binned continuous signal track layout"""

    height: int = 80
    """Expanded track height (px)"""

    padding_top: int = 10
    """Space above the plot area (px)"""

    padding_bottom: int = 10
    """Space below the plot area (px)"""

    display_mode: str = 'area'
    """One of 'area', 'line', 'bar', 'heatmap'"""

    scale_mode: str = 'auto'
    """One of 'auto', 'fixed', 'log'"""

    fixed_min: float = 0.0
    """Lower bound for the fixed scale"""

    fixed_max: float = 100.0
    """Upper bound for the fixed scale"""

    log_floor: float = 0.1
    """Smallest value representable on the log scale"""

    color: str = '#3498db'
    """Signal color"""

    opacity: float = 0.8
    """Area/bar opacity"""

    smooth: int = 0
    """Moving-average window in bins; 0 disables smoothing"""

    show_baseline: bool = True
    """Draw the zero line when it falls inside the domain"""

    heatmap_cmap: str = 'viridis'
    """Matplotlib colormap name for heatmap mode"""


@dataclass
class JunctionTrackConfig:
    """Splice junction arc track layout"""

    height: int = 150
    """Expanded track height (px)"""

    min_reads: int = 1
    """Junctions supported by fewer reads are dropped"""

    min_arc_height: float = 20.0
    """Arc height for the least supported junction (px)"""

    max_arc_height: float = 100.0
    """Arc height for the best supported junction (px)"""

    scale_arc_by_reads: bool = True
    """Scale arc height by read count (True) or by span (False)"""

    color_by: str = 'annotated'
    """One of 'strand', 'motif', 'annotated', 'novel_type', 'read_count'"""

    dashed_novel: bool = True
    """Draw unannotated junctions dashed"""

    show_labels: bool = True
    """Draw read count labels"""

    label_threshold: int = 5
    """Minimum read count for a label"""

    site_radius: float = 3.0
    """Splice-site dot radius (px)"""

    hit_tolerance: float = 3.0
    """Extra pointer tolerance around arcs (px)"""


@dataclass
class ViewerConfig:
    """
    Complete viewer configuration

    Aggregates the browser settings and one configuration per track kind.
    """

    browser: BrowserConfig = field(default_factory=BrowserConfig)
    gene: GeneTrackConfig = field(default_factory=GeneTrackConfig)
    mutation: MutationTrackConfig = field(default_factory=MutationTrackConfig)
    signal: SignalTrackConfig = field(default_factory=SignalTrackConfig)
    annotation: AnnotationTrackConfig = field(default_factory=AnnotationTrackConfig)
    alignment: AlignmentTrackConfig = field(default_factory=AlignmentTrackConfig)
    continuous_signal: ContinuousSignalTrackConfig = field(default_factory=ContinuousSignalTrackConfig)
    junction: JunctionTrackConfig = field(default_factory=JunctionTrackConfig)

    # ============================================================
    # RENDERING (reference backend)
    # ============================================================
    dpi: int = 100
    """DPI for saved figures"""

    background_color: str = '#ffffff'
    """Figure background"""

    def for_kind(self, kind: str):
        """Return the track configuration for a track kind"""
        return getattr(self, kind)

    # ============================================================
    # PRESET CONFIGURATIONS
    # ============================================================

    @classmethod
    def compact(cls) -> 'ViewerConfig':
        """
        Dense settings for crowded regions

        - Thinner read rows and smaller gaps
        - Tighter mutation grouping

        Example:
            >>> config = ViewerConfig.compact()
            >>> composer = TrackComposer(config.browser)
        """
        config = cls()
        config.browser.track_gap = 2
        config.gene.gene_padding = 20.0
        config.gene.row_spacing = 10
        config.mutation.min_gap = 10.0
        config.alignment.read_height = 5
        config.alignment.read_spacing = 1
        config.alignment.read_gap = 1.0
        return config

    @classmethod
    def presentation(cls) -> 'ViewerConfig':
        """
        Settings optimized for slides

        - Wider canvas, larger glyphs
        - Higher DPI for saved figures
        """
        config = cls()
        config.browser.width = 1400
        config.dpi = 150
        config.gene.exon_height = 26
        config.mutation.max_radius = 20.0
        config.alignment.read_height = 12
        return config

    @classmethod
    def debug(cls) -> 'ViewerConfig':
        """
        Settings for inspecting layout problems

        - Large gaps make row boundaries obvious
        - Row limits removed for reads
        """
        config = cls()
        config.browser.track_gap = 20
        config.gene.gene_padding = 100.0
        config.alignment.read_gap = 10.0
        config.alignment.max_rows = 10_000
        return config
