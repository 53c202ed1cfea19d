"""
Unit tests for track variants

Every test uses a 1000 bp region on a 1000 px viewport so that one base pair
maps to one pixel (pixel = position - 1000).
"""
import pytest

from genoview.config import (
    AlignmentTrackConfig,
    ContinuousSignalTrackConfig,
    GeneTrackConfig,
    JunctionTrackConfig,
)
from genoview.tracks import (
    TRACK_TYPES,
    AlignmentTrack,
    AnnotationTrack,
    ContinuousSignalTrack,
    GeneTrack,
    JunctionTrack,
    MutationTrack,
    SignalTrack,
    TrackState,
    create_track,
)
from genoview.tracks.alignment import compute_coverage, describe_flags, parse_cigar, read_color
from genoview.tracks.continuous_signal import smooth_values, y_domain
from genoview.tracks.junction import stroke_width
from genoview.tracks.mutation import MUTATION_COLORS, consequence_color
from genoview.viewport import GenomicRegion, ViewportController


@pytest.fixture
def unit_viewport():
    """chr1:1000-2000 at 1000 px"""
    return ViewportController(region=GenomicRegion('chr1', 1000, 2000), pixel_width=1000)


def _roles(commands):
    return [c.role for c in commands]


def _gene(gene_id, start, end, exons=(), strand='+'):
    return {
        'id': gene_id, 'symbol': gene_id.upper(), 'chromosome': 'chr1',
        'start': start, 'end': end, 'strand': strand,
        'exons': [{'start': s, 'end': e, 'type': t} for s, e, t in exons],
    }


class TestTrackLifecycle:
    """Tests for the shared track skeleton"""

    def test_unloaded_shows_empty_message(self, unit_viewport):
        """A track without data draws the background and its empty message"""
        track = GeneTrack('genes')
        commands = track.layout(unit_viewport)
        assert _roles(commands) == ['background', 'empty']
        assert commands[1].text == 'No genes in this region'
        assert track.state is TrackState.UNLOADED

    def test_loaded_then_rendered(self, unit_viewport):
        track = GeneTrack('genes')
        track.set_data({'genes': [_gene('g1', 1100, 1300)]})
        assert track.state is TrackState.DATA_LOADED
        track.layout(unit_viewport)
        assert track.state is TrackState.RENDERED

    def test_no_visible_features(self, unit_viewport):
        """Data outside the region gives the empty message"""
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 5000, 6000)])
        commands = track.layout(unit_viewport)
        assert _roles(commands) == ['background', 'empty']

    def test_hidden_track_draws_nothing(self, unit_viewport):
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 1100, 1300)])
        track.set_visible(False)
        assert track.layout(unit_viewport) == []

    def test_collapsed(self, unit_viewport):
        """Collapsed tracks draw a placeholder at collapsed_height"""
        track = GeneTrack('genes', name='Genes')
        track.set_data([_gene('g1', 1100, 1300)])
        track.set_collapsed(True)
        commands = track.layout(unit_viewport)
        assert track.height == 20
        assert _roles(commands) == ['background', 'collapsed-label']
        assert commands[1].text == 'Genes (collapsed)'
        assert commands[0].height == 20

    def test_clear(self, unit_viewport):
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 1100, 1300)])
        track.layout(unit_viewport)
        track.clear()
        assert track.state is TrackState.UNLOADED
        assert track.data is None
        assert track.hit_test(150, 20) is None

    def test_layout_is_deterministic(self, unit_viewport):
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 1100, 1300, [(1150, 1200, 'cds')]), _gene('g2', 1200, 1400)])
        assert track.layout(unit_viewport) == track.layout(unit_viewport)

    def test_click_callback(self, unit_viewport):
        """notify_click passes the feature and pointer position to the callback"""
        track = AnnotationTrack('ann')
        annotation = {'id': 'a1', 'chromosome': 'chr1', 'start': 1100, 'end': 1400, 'name': 'E1'}
        track.set_data([annotation])
        track.layout(unit_viewport)
        clicks = []
        track.set_click_callback(lambda feature, px, py: clicks.append((feature, px, py)))
        assert track.notify_click(200, 20) is annotation
        assert clicks == [(annotation, 200, 20)]
        assert track.notify_click(900, 20) is None
        assert len(clicks) == 1

    def test_hover_callback(self, unit_viewport):
        track = AnnotationTrack('ann')
        annotation = {'id': 'a1', 'chromosome': 'chr1', 'start': 1100, 'end': 1400, 'name': 'E1'}
        track.set_data([annotation])
        track.layout(unit_viewport)
        assert track.notify_hover(300, 20) is annotation
        hovered = []
        track.set_hover_callback(lambda feature, px, py: hovered.append(feature['id']))
        track.notify_hover(300, 20)
        track.set_hover_callback(None)
        track.notify_hover(300, 20)
        assert hovered == ['a1']

    def test_collapse_drops_hit_boxes(self, unit_viewport):
        """Features laid out before a collapse or hide are no longer hit"""
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 1100, 1300)])
        track.layout(unit_viewport)
        assert track.hit_test(150, 20) is track.data[0]

        track.set_collapsed(True)
        assert track.hit_test(150, 15) is None
        assert track.state is TrackState.DATA_LOADED

        track.set_collapsed(False)
        track.layout(unit_viewport)
        track.set_visible(False)
        assert track.hit_test(150, 20) is None

    def test_unchanged_flag_keeps_hit_boxes(self, unit_viewport):
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 1100, 1300)])
        track.layout(unit_viewport)
        track.set_collapsed(False)
        track.set_visible(True)
        assert track.hit_test(150, 20) is track.data[0]
        assert track.state is TrackState.RENDERED


class TestRegionFiltering:
    """Features on other chromosomes or past the half-open region end are not drawn"""

    @pytest.mark.parametrize("track_class,feature", [
        (GeneTrack, _gene('g1', 1100, 1300)),
        (MutationTrack, {'id': 'm1', 'chromosome': 'chr1', 'position': 1500, 'sample_count': 1}),
        (AnnotationTrack, {'id': 'a1', 'chromosome': 'chr1', 'start': 1100, 'end': 1400, 'name': 'E1'}),
    ])
    def test_other_chromosome_excluded(self, unit_viewport, track_class, feature):
        track = track_class('t')
        track.set_data([dict(feature, chromosome='chr2')])
        assert _roles(track.layout(unit_viewport)) == ['background', 'empty']
        track.set_data([feature])
        assert 'empty' not in _roles(track.layout(unit_viewport))

    def test_mutation_at_region_end_excluded(self, unit_viewport):
        track = MutationTrack('mut')
        track.set_data([{'id': 'm1', 'chromosome': 'chr1', 'position': 2000, 'sample_count': 1}])
        assert _roles(track.layout(unit_viewport)) == ['background', 'empty']
        track.set_data([{'id': 'm1', 'chromosome': 'chr1', 'position': 1999, 'sample_count': 1}])
        assert 'head' in _roles(track.layout(unit_viewport))


class TestRegistry:
    """Tests for TRACK_TYPES / create_track"""

    def test_all_kinds_registered(self):
        assert set(TRACK_TYPES) == {'gene', 'mutation', 'signal', 'annotation',
                                    'alignment', 'continuous_signal', 'junction'}

    def test_create_track(self):
        track = create_track('junction', 'sj', name='Junctions')
        assert isinstance(track, JunctionTrack)
        assert track.name == 'Junctions'
        assert isinstance(track.config, JunctionTrackConfig)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            create_track('hic', 'contacts')


class TestGeneTrack:
    """Tests for gene packing and drawing"""

    def test_overlapping_genes_use_separate_rows(self, unit_viewport):
        """Overlaps open a second row; the third gene reuses row 0"""
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 1100, 1300), _gene('g2', 1200, 1400), _gene('g3', 1500, 1600)])
        commands = track.layout(unit_viewport)
        introns = {c.feature_id: c for c in commands if c.role == 'intron'}
        row_height = 20 + 15
        assert introns['g1'].y == 10 + 10
        assert introns['g2'].y == 10 + row_height + 10
        assert introns['g3'].y == introns['g1'].y

    def test_overflow_indicator(self, unit_viewport):
        """Genes beyond the height-derived row limit are counted, not drawn"""
        track = GeneTrack('genes')
        reported = []
        track.on_overflow = reported.append
        track.set_data([_gene('g1', 1100, 1300), _gene('g2', 1200, 1400),
                        _gene('g4', 1250, 1450), _gene('g3', 1500, 1600)])
        assert track.max_rows() == 2
        commands = track.layout(unit_viewport)
        assert 'g4' not in {c.feature_id for c in commands}
        overflow = [c for c in commands if c.role == 'overflow']
        assert overflow[0].text == '+1 more'
        assert track.last_overflow.count == 1
        assert reported == [track.last_overflow]

    def test_configured_row_limit(self):
        assert GeneTrack('g', config=GeneTrackConfig(max_rows=7)).max_rows() == 7

    def test_exons_and_hit_test(self, unit_viewport):
        """hit_test gives the gene record; exon_at gives the exon under the pointer"""
        exon = (1150, 1200, 'cds')
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 1100, 1300, [exon])])
        commands = track.layout(unit_viewport)
        rects = [c for c in commands if c.role == 'exon']
        assert len(rects) == 1
        assert rects[0].x == 150
        assert rects[0].width == 50
        assert rects[0].color == '#1976D2'

        assert track.hit_test(175, 20) is track.data[0]
        assert track.exon_at(175, 20)['start'] == 1150
        assert track.hit_test(120, 20) is track.data[0]
        assert track.exon_at(120, 20) is None
        assert track.hit_test(120, 70) is None
        assert track.exon_at(120, 70) is None

    def test_offscreen_exons_skipped(self, unit_viewport):
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 500, 1300, [(600, 700, 'cds'), (1200, 1250, 'utr3')])])
        rects = [c for c in track.layout(unit_viewport) if c.role == 'exon']
        assert len(rects) == 1
        assert rects[0].color == '#64B5F6'

    def test_intron_clipped_and_labelled(self, unit_viewport):
        track = GeneTrack('genes')
        track.set_data([_gene('g1', 500, 2500, strand='-')])
        commands = track.layout(unit_viewport)
        intron = next(c for c in commands if c.role == 'intron')
        assert (intron.x, intron.x2) == (0.0, 1000)
        assert next(c for c in commands if c.role == 'label').text == 'G1'
        assert next(c for c in commands if c.role == 'strand').text == '←'
        assert any(c.role == 'strand-arrow' for c in commands)

    def test_tooltip(self, tp53_gene):
        track = GeneTrack('genes')
        fields = dict(track.tooltip_fields(tp53_gene, exon=tp53_gene['exons'][1]))
        assert fields['Gene'] == 'TP53'
        assert fields['Location'] == 'chr17:7,668,402-7,687,550'
        assert fields['Strand'] == 'Reverse (-)'
        assert fields['Exons'] == '5'
        assert fields['Exon Type'] == 'CDS'
        assert 'Exon Type' not in dict(track.tooltip_fields(tp53_gene))


def _mutation(mutation_id, position, samples=1, consequence='missense', **extra):
    record = {'id': mutation_id, 'chromosome': 'chr1', 'position': position,
              'start': position, 'end': position + 1,
              'consequence': consequence, 'sample_count': samples}
    record.update(extra)
    return record


class TestMutationTrack:
    """Tests for lollipops and grouped glyphs"""

    def test_single_lollipops(self, unit_viewport):
        """Radius and stem scale with sample count"""
        track = MutationTrack('mut')
        track.set_data([_mutation('m1', 1100, 1), _mutation('m2', 1500, 20, aa_change='R175H')])
        commands = track.layout(unit_viewport)
        heads = {c.feature_id: c for c in commands if c.role == 'head'}
        assert heads['m1'].radius == 4.0
        assert heads['m1'].y == 80 - 30 - 4
        assert heads['m2'].radius == 15.0
        assert heads['m2'].y == 80 - 60 - 15
        labels = [c for c in commands if c.role == 'label']
        assert [c.text for c in labels] == ['R175H']

    def test_circle_hit_test(self, unit_viewport):
        track = MutationTrack('mut')
        m2 = _mutation('m2', 1500, 20)
        track.set_data([_mutation('m1', 1100, 1), m2])
        track.layout(unit_viewport)
        assert track.hit_test(500, 5) is m2
        assert track.hit_test(514, 19) is None

    def test_close_mutations_grouped(self, unit_viewport):
        """Mutations within min_gap become one pie with a wedge per member"""
        track = MutationTrack('mut')
        first = _mutation('m1', 1300, 1, 'missense')
        second = _mutation('m2', 1310, 3, 'nonsense')
        track.set_data([second, first])
        commands = track.layout(unit_viewport)

        wedges = [c for c in commands if c.role == 'wedge']
        assert [c.feature_id for c in wedges] == ['m1', 'm2']
        assert wedges[0].theta2 - wedges[0].theta1 == pytest.approx(90.0)
        assert wedges[1].theta2 - wedges[1].theta1 == pytest.approx(270.0)
        assert wedges[1].color == MUTATION_COLORS['nonsense']
        assert next(c for c in commands if c.role == 'count').text == '2'
        assert not any(c.role == 'head' for c in commands)

        cx, cy, r = wedges[0].x, wedges[0].y, wedges[0].radius
        assert cx == pytest.approx(305.0)
        assert track.hit_test(cx + r / 2, cy) is first
        assert track.hit_test(cx - r / 2, cy) is second
        # 45 degrees lies below the centre in y-down pixels
        assert track.hit_test(cx + r / 3, cy + r / 3) is first
        assert track.hit_test(cx + r / 3, cy - r / 3) is second

    def test_outside_region_excluded(self, unit_viewport):
        track = MutationTrack('mut')
        track.set_data([_mutation('m1', 2500)])
        assert _roles(track.layout(unit_viewport)) == ['background', 'empty']

    def test_colors(self):
        assert consequence_color('missense') == '#E64A19'
        assert consequence_color('unheard_of') == MUTATION_COLORS['other']

    def test_tooltip(self):
        track = MutationTrack('mut')
        fields = dict(track.tooltip_fields(_mutation('m1', 7675088, 42, gene='TP53',
                                                     aa_change='R175H', vaf=0.25)))
        assert fields['Change'] == 'R175H'
        assert fields['Position'] == 'chr1:7,675,088'
        assert fields['Samples'] == '42'
        assert fields['VAF'] == '25.0%'


class TestSignalTrack:
    """Tests for point coverage"""

    @staticmethod
    def _points():
        return [{'position': 1000 + 100 * i, 'value': v}
                for i, v in enumerate([5, 10, 37, 20, 8, 3, 0, 12, 30, 25, 15])]

    def test_parse_sorts_and_bounds(self):
        track = SignalTrack('cov')
        track.set_data(list(reversed(self._points())))
        assert track.data['points'][0]['position'] == 1000
        assert track.data['max'] == 37
        assert track.y_max() == 50

    def test_layout(self, unit_viewport):
        track = SignalTrack('cov')
        track.set_data({'points': self._points()})
        commands = track.layout(unit_viewport)
        roles = _roles(commands)
        assert 'signal-area' in roles and 'signal-line' in roles
        labels = [c.text for c in commands if c.role == 'axis-label']
        assert labels[-1] == '50'
        line = next(c for c in commands if c.role == 'signal-line')
        assert len(line.points) == 11

    def test_nearest_point(self, unit_viewport):
        track = SignalTrack('cov')
        track.set_data(self._points())
        track.layout(unit_viewport)
        assert track.hit_test(240, 30)['position'] == 1200
        assert track.hit_test(240, 58) is None


class TestAnnotationTrack:
    """Tests for annotation bars"""

    def test_bars_and_labels(self, unit_viewport):
        track = AnnotationTrack('ann')
        wide = {'id': 'a1', 'chromosome': 'chr1', 'start': 1100, 'end': 1400, 'name': 'Enhancer E1'}
        narrow = {'id': 'a2', 'chromosome': 'chr1', 'start': 1500, 'end': 1510, 'name': 'CpG'}
        track.set_data([wide, narrow])
        commands = track.layout(unit_viewport)

        bars = [c for c in commands if c.role == 'annotation']
        assert [c.width for c in bars] == [300, 10]
        assert bars[0].y == 12
        assert bars[0].color == '#9C27B0'
        assert [c.text for c in commands if c.role == 'label'] == ['Enhancer E1']
        assert track.hit_test(505, 20) is narrow

    def test_tooltip(self):
        fields = dict(AnnotationTrack('ann').tooltip_fields(
            {'id': 'a1', 'chromosome': 'chr1', 'start': 1000, 'end': 3500, 'name': 'P1', 'type': 'promoter'}))
        assert fields['Size'] == '2,500 bp'
        assert fields['Type'] == 'promoter'


def _read(read_id, start, end, strand='+', cigar=None, **extra):
    record = {'id': read_id, 'chromosome': 'chr1', 'start': start, 'end': end,
              'strand': strand, 'mapq': 60, 'cigar': cigar or f"{end - start}M", 'flags': 0}
    record.update(extra)
    return record


class TestAlignmentHelpers:
    """Tests for CIGAR parsing, flags, colors and coverage"""

    def test_parse_cigar(self):
        ops = parse_cigar('10S50M2I30M5D20M', 100)
        assert [(o.op, o.ref_start, o.ref_end) for o in ops] == [
            ('S', 100, 100), ('M', 100, 150), ('I', 150, 150),
            ('M', 150, 180), ('D', 180, 185), ('M', 185, 205),
        ]

    def test_describe_flags(self):
        assert describe_flags(0x1 | 0x10 | 0x40) == ['paired', 'reverse', 'first in pair']
        assert describe_flags(0) == []

    def test_strand_and_mapq_colors(self):
        assert read_color(_read('r', 0, 10, '-'), 'strand') == '#d94a4a'
        assert read_color(_read('r', 0, 10), 'mapq') == '#fde725'

    @pytest.mark.parametrize("insert_size,color", [(0, '#888'), (100, '#3498db'),
                                                   (500, '#2ecc71'), (-1000, '#e74c3c')])
    def test_insert_size_colors(self, insert_size, color):
        assert read_color(_read('r', 0, 10, insert_size=insert_size), 'insert_size') == color

    def test_pair_orientation_colors(self):
        assert read_color(_read('r', 100, 150, mate_chromosome='chr2'), 'pair_orientation') == '#9b59b6'
        assert read_color(_read('r', 100, 150, mate_start=50), 'pair_orientation') == '#e74c3c'
        assert read_color(_read('r', 100, 150, mate_start=300), 'pair_orientation') == '#4a90d9'

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            read_color(_read('r', 0, 10), 'base_quality')

    def test_compute_coverage(self):
        reads = [_read('a', 0, 10), _read('b', 5, 10, '-')]
        coverage = compute_coverage(reads, 0, 10, 2)
        assert list(coverage['edges']) == [0, 5, 10]
        assert list(coverage['forward']) == [1.0, 1.0]
        assert list(coverage['reverse']) == [0.0, 1.0]

    def test_coverage_ignores_deletions(self):
        coverage = compute_coverage([_read('a', 0, 10, cigar='4M2D4M')], 0, 10, 1)
        assert coverage['forward'][0] == pytest.approx(0.8)


class TestAlignmentTrack:
    """Tests for the read pileup"""

    def test_pileup_and_overflow(self, unit_viewport):
        track = AlignmentTrack('reads', config=AlignmentTrackConfig(max_rows=2))
        track.set_data([_read('r1', 1100, 1200), _read('r2', 1120, 1220), _read('r3', 1140, 1240)])
        commands = track.layout(unit_viewport)
        drawn = {c.feature_id for c in commands if c.role == 'read'}
        assert drawn == {'r1', 'r2'}
        assert track.last_overflow.count == 1
        assert any(c.role == 'coverage-forward' for c in commands)

    def test_min_mapq_filter(self, unit_viewport):
        track = AlignmentTrack('reads', config=AlignmentTrackConfig(min_mapq=30))
        track.set_data([_read('r1', 1100, 1200, mapq=10), _read('r2', 1300, 1400)])
        drawn = {c.feature_id for c in track.layout(unit_viewport) if c.role == 'read'}
        assert drawn == {'r2'}

    def test_leading_soft_clip_extends_left(self, unit_viewport):
        track = AlignmentTrack('reads', config=AlignmentTrackConfig(show_coverage=False))
        track.set_data([_read('r1', 1100, 1140, cigar='10S40M')])
        commands = track.layout(unit_viewport)
        clip = next(c for c in commands if c.role == 'soft-clip')
        assert clip.x == 90
        assert clip.width == 10
        assert track.hit_test(120, 5)['id'] == 'r1'

    def test_tooltip_flags(self):
        fields = dict(AlignmentTrack('reads').tooltip_fields(_read('r1', 0, 10, flags=0x1 | 0x2)))
        assert fields['Flags'] == 'paired, proper pair'


def _bin(start, value):
    return {'chromosome': 'chr1', 'start': start, 'end': start + 100, 'value': value}


class TestContinuousSignal:
    """Tests for smoothing, scales and display modes"""

    def test_smooth_values(self):
        assert list(smooth_values([0, 0, 3, 0, 0], 3)) == [0, 1, 1, 1, 0]
        assert list(smooth_values([1, 2], 1)) == [1, 2]

    def test_auto_domain(self):
        config = ContinuousSignalTrackConfig()
        assert y_domain([0, 10], config) == pytest.approx((-1.0, 11.0))
        assert y_domain([5, 5], config) == (0.0, 5.0)
        assert y_domain([0, 0], config) == (0.0, 1.0)
        assert y_domain([], config) == (0.0, 100.0)

    def test_fixed_and_log_domain(self):
        assert y_domain([3, 500], ContinuousSignalTrackConfig(scale_mode='fixed')) == (0.0, 100.0)
        low, high = y_domain([1, 100], ContinuousSignalTrackConfig(scale_mode='log'))
        assert low == 0.1
        assert high == pytest.approx(109.9)

    @pytest.mark.parametrize("mode,role", [('area', 'signal-area'), ('line', 'signal-line'),
                                           ('bar', 'signal-bar'), ('heatmap', 'signal-heat')])
    def test_display_modes(self, unit_viewport, mode, role):
        track = ContinuousSignalTrack('bins', config=ContinuousSignalTrackConfig(display_mode=mode))
        track.set_data([_bin(1000 + 100 * i, v) for i, v in enumerate([1, 4, 9, 4, 1])])
        commands = track.layout(unit_viewport)
        assert role in _roles(commands)
        assert any(c.role == 'scale-label' for c in commands)

    def test_baseline_only_on_linear_scale(self, unit_viewport):
        data = [_bin(1000, 1.0), _bin(1100, 50.0)]
        linear = ContinuousSignalTrack('a')
        linear.set_data(data)
        assert 'baseline' in _roles(linear.layout(unit_viewport))
        log = ContinuousSignalTrack('b', config=ContinuousSignalTrackConfig(scale_mode='log'))
        log.set_data(data)
        assert 'baseline' not in _roles(log.layout(unit_viewport))

    def test_unknown_display_mode(self, unit_viewport):
        track = ContinuousSignalTrack('bins', config=ContinuousSignalTrackConfig(display_mode='violin'))
        track.set_data([_bin(1000, 1.0)])
        with pytest.raises(ValueError):
            track.layout(unit_viewport)

    def test_bin_hit_test(self, unit_viewport):
        track = ContinuousSignalTrack('bins')
        track.set_data([_bin(1000, 1.0), _bin(1100, 2.0)])
        track.layout(unit_viewport)
        assert track.hit_test(150, 40)['value'] == 2.0


def _junction(junction_id, start, end, reads, strand='+', annotated=True, **extra):
    record = {'id': junction_id, 'chromosome': 'chr1', 'start': start, 'end': end,
              'strand': strand, 'read_count': reads, 'motif': 'GT-AG', 'is_annotated': annotated}
    record.update(extra)
    return record


class TestJunctionTrack:
    """Tests for splice junction arcs"""

    @staticmethod
    def _loaded(viewport, **config):
        track = JunctionTrack('sj', config=JunctionTrackConfig(**config))
        track.set_data([
            _junction('j1', 1200, 1600, 50),
            _junction('j2', 1300, 1500, 10, strand='-', annotated=False,
                      motif='GC-AG', novel_type='exon_skip'),
        ])
        return track, track.layout(viewport)

    def test_stroke_width(self):
        assert stroke_width(0) == 1.0
        assert stroke_width(7) == pytest.approx(3.0)
        assert stroke_width(1000) == 6.0

    def test_arcs_above_and_below(self, unit_viewport):
        """Plus-strand arcs rise above the baseline, minus-strand arcs hang below"""
        _, commands = self._loaded(unit_viewport)
        arcs = {c.feature_id: c for c in commands if c.role == 'arc'}
        assert arcs['j1'].points[1] == (400, 75 - 100)
        assert arcs['j2'].points[1][1] > 75
        assert not arcs['j1'].dashed
        assert arcs['j2'].dashed
        assert arcs['j1'].stroke == '#3498db'
        assert arcs['j2'].stroke == '#e74c3c'
        assert sorted(c.text for c in commands if c.role == 'label') == ['10', '50']

    def test_curve_hit_test(self, unit_viewport):
        track, _ = self._loaded(unit_viewport)
        assert track.hit_test(400, 25)['id'] == 'j1'
        assert track.hit_test(400, 92)['id'] == 'j2'
        assert track.hit_test(400, 60) is None

    def test_min_reads_and_stats(self, unit_viewport):
        track, commands = self._loaded(unit_viewport, min_reads=20)
        assert {c.feature_id for c in commands if c.role == 'arc'} == {'j1'}
        track_all, _ = self._loaded(unit_viewport)
        stats = track_all.stats()
        assert stats['total'] == 2
        assert stats['known'] == 1
        assert stats['novel'] == 1
        assert stats['total_reads'] == 60
        assert stats['by_motif'] == {'GT-AG': 1, 'GC-AG': 1}

    def test_arc_height_by_span(self):
        track = JunctionTrack('sj', config=JunctionTrackConfig(scale_arc_by_reads=False))
        assert track.arc_height(_junction('j', 1000, 1400, 5), 100) == pytest.approx(20.8)

    def test_color_schemes(self):
        novel = _junction('j', 0, 10, 5, annotated=False, novel_type='alt_donor')
        assert JunctionTrack('a', config=JunctionTrackConfig(color_by='novel_type')).junction_color(novel) == '#f39c12'
        assert JunctionTrack('b', config=JunctionTrackConfig(color_by='motif')).junction_color(novel) == '#27ae60'
        assert JunctionTrack('c', config=JunctionTrackConfig(color_by='read_count')).junction_color(novel).startswith('#')
        with pytest.raises(ValueError):
            JunctionTrack('d', config=JunctionTrackConfig(color_by='tissue')).junction_color(novel)
